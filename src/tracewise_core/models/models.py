from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class OrderItem(BaseModel):
    sku: str
    quantity: int
    unit_price: float

    @property
    def subtotal(self) -> float:
        return round(self.quantity * self.unit_price, 2)


class Order(BaseModel):
    """A customer order submitted to the checkout."""

    id: str
    customer_id: str
    items: List[OrderItem] = Field(default_factory=list)
    currency: str = 'EUR'
    payment_method: Literal['card', 'paypal', 'wire'] = 'card'

    @property
    def total(self) -> float:
        return round(sum(item.subtotal for item in self.items), 2)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)


class Receipt(BaseModel):
    """Outcome of a successful checkout."""

    order_id: str
    transaction_id: str
    total: float
    currency: str = 'EUR'
    reserved: dict[str, int] = Field(default_factory=dict)
    """Units reserved per SKU."""

    confirmation_id: Optional[str] = None
