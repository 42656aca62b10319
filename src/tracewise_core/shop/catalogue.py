CATALOGUE: dict[str, float] = {
    'mug-01': 12.5,
    'notebook-a5': 9.9,
    'sticker-pack': 4.5,
    'tshirt-m': 24.0,
    'hoodie-l': 59.9,
    'laptop-15': 1299.0,
}
"""Unit price of every item sold by the example shop, by SKU."""
