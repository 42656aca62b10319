import threading
from typing import Iterable, Mapping, Optional

from tracewise_core.exceptions import OutOfStockException
from tracewise_core.models import OrderItem
from tracewise_core.shop.catalogue import CATALOGUE


class Inventory:
    """In-memory stock keeper.

    Reservations are all-or-nothing: if any item is short, nothing is taken.
    Thread-safe, as checkouts may run concurrently.
    """

    def __init__(self, stock: Optional[Mapping[str, int]] = None):
        self._lock = threading.Lock()
        self._stock: dict[str, int] = dict(stock or {})

    @classmethod
    def with_catalogue(cls, units: int) -> 'Inventory':
        """Stock `units` of every catalogue item."""
        return cls({sku: units for sku in CATALOGUE})

    def knows(self, sku: str) -> bool:
        with self._lock:
            return sku in self._stock

    def available(self, sku: str) -> int:
        with self._lock:
            return self._stock.get(sku, 0)

    def reserve(self, items: Iterable[OrderItem]) -> dict[str, int]:
        """Take the requested units out of stock.

        Returns
        -------
        dict[str, int]
            Units reserved per SKU, to be passed to `release` on failure.

        Raises
        ------
        OutOfStockException
            If any SKU is unknown or has fewer units than requested.
        ValueError
            If a quantity is not positive.

        Stock is left unchanged when anything is raised.
        """
        requested: dict[str, int] = {}
        for item in items:
            if item.quantity <= 0:
                raise ValueError(
                    f'Quantities must be positive, got {item.quantity} for [{item.sku}]'
                )
            requested[item.sku] = requested.get(item.sku, 0) + item.quantity

        with self._lock:
            for sku, quantity in requested.items():
                available = self._stock.get(sku, 0)
                if sku not in self._stock or quantity > available:
                    raise OutOfStockException(
                        sku=sku, requested=quantity, available=available
                    )

            for sku, quantity in requested.items():
                self._stock[sku] -= quantity

        return requested

    def release(self, reservation: Mapping[str, int]) -> None:
        """Put reserved units back in stock."""
        with self._lock:
            for sku, quantity in reservation.items():
                self._stock[sku] = self._stock.get(sku, 0) + quantity
