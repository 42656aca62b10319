class OutOfStockException(Exception):
    """Exception raised when the inventory cannot cover the requested quantity.

    Attributes
    ----------
    sku : str
        The item that is short
    requested : int
        Units asked for by the order
    available : int
        Units left in stock when the reservation was attempted

    Example
    ---------
    try:
        raise OutOfStockException(sku="mug-01", requested=5, available=2)
    except OutOfStockException as e:
        print(e)  # Will print: "Out of stock for mug-01: requested 5, available 2"
    """

    def __init__(self, sku: str, requested: int, available: int):
        self.sku = sku
        self.requested = requested
        self.available = available
        self.message = f'requested {requested}, available {available}'
        super().__init__(self.message)

    def __str__(self) -> str:
        return f'Out of stock for {self.sku}: {self.message}'
