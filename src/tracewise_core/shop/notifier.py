import time
import uuid

from tracewise_core.models import Order, Receipt


class Notifier:
    """Collects order confirmations instead of sending e-mails."""

    def __init__(self, latency_ms: int = 0):
        self.latency_ms = latency_ms
        self.outbox: list[dict] = []

    def send_confirmation(self, order: Order, receipt: Receipt) -> str:
        if self.latency_ms:
            time.sleep(self.latency_ms / 1000)

        confirmation_id = f'msg-{uuid.uuid4().hex[:8]}'
        self.outbox.append(
            {
                'id': confirmation_id,
                'to': order.customer_id,
                'order_id': order.id,
                'transaction_id': receipt.transaction_id,
            }
        )
        return confirmation_id
