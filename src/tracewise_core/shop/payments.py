import time
import uuid
from typing import Sequence

from tracewise_core.exceptions import PaymentDeclinedException

DEFAULT_METHODS = ('card', 'paypal')


class PaymentGateway:
    """Simulated payment provider.

    Declines charges above `limit` and methods it does not support.
    """

    def __init__(
        self,
        limit: float = 5000.0,
        latency_ms: int = 0,
        supported_methods: Sequence[str] = DEFAULT_METHODS,
    ):
        self.limit = limit
        self.latency_ms = latency_ms
        self.supported_methods = tuple(supported_methods)

    def charge(self, order_id: str, amount: float, method: str) -> str:
        """Charge `amount` for `order_id` and return the transaction id."""
        if self.latency_ms:
            time.sleep(self.latency_ms / 1000)

        if method not in self.supported_methods:
            raise PaymentDeclinedException(
                message=f'Payment method [{method}] is not supported',
                reason='unsupported_method',
                details={'supported': list(self.supported_methods)},
            )

        if amount > self.limit:
            raise PaymentDeclinedException(
                message=f'Amount {amount:.2f} exceeds the limit',
                reason='limit_exceeded',
                details={'amount': amount, 'limit': self.limit},
            )

        return f'tx-{uuid.uuid4().hex[:12]}'
