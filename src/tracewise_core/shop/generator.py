import random
from typing import List, Mapping, Optional

from tracewise_core.models import Order, OrderItem
from tracewise_core.shop.catalogue import CATALOGUE

TROUBLE_RATE = 0.2
"""Share of generated orders that are expected to fail the checkout."""


class OrderGenerator:
    """Deterministic source of demo orders.

    About one order in five is built to fail: it asks for more stock than
    any shop keeps, goes over the payment limit, or uses a payment method
    the gateway does not accept. The same seed always yields the same orders.
    """

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def generate(
        self, count: int, catalogue: Mapping[str, float] = CATALOGUE
    ) -> List[Order]:
        return [self._order(catalogue) for _ in range(count)]

    def _order(self, catalogue: Mapping[str, float]) -> Order:
        rng = self._random
        skus = sorted(catalogue)

        order = Order(
            id=f'ord-{rng.randrange(16**6):06x}',
            customer_id=f'cus-{rng.randint(1, 50):03d}',
            items=[
                OrderItem(sku=sku, quantity=rng.randint(1, 3), unit_price=catalogue[sku])
                for sku in rng.sample(skus, k=rng.randint(1, min(3, len(skus))))
            ],
            payment_method=rng.choice(['card', 'card', 'card', 'paypal']),
        )

        if rng.random() < TROUBLE_RATE:
            order = self._troublesome(order, catalogue)

        return order

    def _troublesome(self, order: Order, catalogue: Mapping[str, float]) -> Order:
        trouble = self._random.choice(['out_of_stock', 'over_limit', 'unsupported_method'])

        if trouble == 'unsupported_method':
            return order.model_copy(update={'payment_method': 'wire'})

        if trouble == 'out_of_stock':
            sku = min(catalogue, key=catalogue.get)
            quantity = 10_000
        else:
            sku = max(catalogue, key=catalogue.get)
            quantity = 5

        items = [item for item in order.items if item.sku != sku]
        items.append(OrderItem(sku=sku, quantity=quantity, unit_price=catalogue[sku]))

        return order.model_copy(update={'items': items})
