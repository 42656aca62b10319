"""Checkout flow of the example shop, instrumented by hand.

Automatic instrumentation would show a single `checkout` span: we would know
that a checkout was slow or failed, but not which order, which step, or why.
In `detailed` mode the service adds the three kinds of manual
instrumentation on top of it:

- attributes on the spans, to know *what* was processed (`order.id`, `order.total`)
- events, to mark *when* something happened inside a span (`payment.authorized`)
- child spans, to know *where* the time went (`reserve_inventory`, `charge_payment`)
"""

import logging
import time
from contextlib import contextmanager, nullcontext
from typing import Any, Iterator, Literal, Mapping, Optional

from tracewise_core.exceptions import (
    InvalidOrderException,
    PaymentDeclinedException,
)
from tracewise_core.logging import create_null_logger
from tracewise_core.models import Order, Receipt
from tracewise_core.shop.inventory import Inventory
from tracewise_core.shop.notifier import Notifier
from tracewise_core.shop.payments import PaymentGateway
from tracewise_core.tracing import TracewiseTracer, get_tracer


class CheckoutService:
    """Validate, reserve, charge and confirm an order.

    Parameters
    ----------
    inventory : Inventory
        Where stock is reserved.
    gateway : PaymentGateway
        Where the order total is charged.
    notifier : Notifier
        Where confirmations are sent.
    tracer : TracewiseTracer, optional
        The tracer to instrument with. Defaults to the global tracer.
    detail : str, optional
        `basic` produces only the `checkout` span, `detailed` adds attributes,
        events and child spans. Default `detailed`.
    logger : logging.Logger, optional
        Logger for checkout outcomes. Defaults to a null logger.
    """

    def __init__(
        self,
        inventory: Inventory,
        gateway: PaymentGateway,
        notifier: Notifier,
        tracer: Optional[TracewiseTracer] = None,
        detail: Literal['basic', 'detailed'] = 'detailed',
        logger: Optional[logging.Logger] = None,
    ):
        self.inventory = inventory
        self.gateway = gateway
        self.notifier = notifier
        self._tracer = tracer or get_tracer()
        self._detailed = detail == 'detailed'
        self._logger = logger or create_null_logger('tracewise.shop')

    # -------------------------------------------------------------------------
    # Instrumentation helpers, no-ops in basic mode
    # -------------------------------------------------------------------------

    def _step(self, name: str, attributes: Mapping[str, Any]):
        if not self._detailed:
            return nullcontext()
        return self._tracer.span(name, _attributes=attributes)

    def _event(self, name: str, attributes: Optional[Mapping[str, Any]] = None):
        if self._detailed:
            self._tracer.add_event(name, attributes)

    def _attribute(self, key: str, value: Any):
        if self._detailed:
            self._tracer.set_attribute(key, value)

    @contextmanager
    def _root_span(self, order: Order) -> Iterator[None]:
        attributes = (
            {
                'order.id': order.id,
                'order.items.count': order.item_count,
                'order.total': order.total,
                'order.currency': order.currency,
                'customer.id': order.customer_id,
                'payment.method': order.payment_method,
            }
            if self._detailed
            else None
        )
        with self._tracer.span('checkout', _attributes=attributes):
            yield

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def checkout(self, order: Order) -> Receipt:
        """Run the whole checkout for `order`.

        Raises
        ------
        InvalidOrderException
            If the order is empty, has non-positive quantities or unknown items.
        OutOfStockException
            If the inventory cannot cover the order.
        PaymentDeclinedException
            If the gateway refuses the charge. The reservation is released.
        """
        started = time.perf_counter()
        status = 'failed'

        try:
            with self._root_span(order):
                try:
                    receipt = self._process(order)
                except Exception as exc:
                    self._event(
                        'checkout.failed',
                        {'error.type': type(exc).__name__, 'error.message': str(exc)},
                    )
                    self._logger.warning(f'Checkout of order {order.id} failed: {exc}')
                    raise

                self._attribute('checkout.transaction_id', receipt.transaction_id)
                self._logger.info(
                    f'Order {order.id} checked out, {order.total:.2f} {order.currency}'
                )
                status = 'ok'
                return receipt
        finally:
            self._tracer.count('orders.processed', status=status)
            self._tracer.histogram(
                'checkout.duration',
                (time.perf_counter() - started) * 1000,
                unit='ms',
                status=status,
            )

    def _process(self, order: Order) -> Receipt:
        self._validate(order)

        reservation = self._reserve(order)

        try:
            transaction_id = self._charge(order)
        except PaymentDeclinedException:
            self.inventory.release(reservation)
            self._event(
                'inventory.released', {'inventory.units': sum(reservation.values())}
            )
            raise

        receipt = Receipt(
            order_id=order.id,
            transaction_id=transaction_id,
            total=order.total,
            currency=order.currency,
            reserved=reservation,
        )
        receipt.confirmation_id = self._confirm(order, receipt)

        return receipt

    def _validate(self, order: Order) -> None:
        with self._step('validate_order', {'order.id': order.id}):
            if not order.items:
                raise InvalidOrderException('The order has no items', order.id)

            for item in order.items:
                if item.quantity <= 0:
                    raise InvalidOrderException(
                        'Quantities must be positive',
                        order.id,
                        details={'sku': item.sku, 'quantity': item.quantity},
                    )
                if not self.inventory.knows(item.sku):
                    raise InvalidOrderException(
                        f'Unknown item [{item.sku}]',
                        order.id,
                        details={'sku': item.sku},
                    )

            self._event('order.validated', {'order.items.count': order.item_count})

    def _reserve(self, order: Order) -> dict[str, int]:
        skus = sorted({item.sku for item in order.items})

        with self._step('reserve_inventory', {'inventory.skus': skus}):
            reservation = self.inventory.reserve(order.items)

            for sku, quantity in reservation.items():
                self._event(
                    'inventory.reserved',
                    {'sku': sku, 'quantity': quantity, 'remaining': self.inventory.available(sku)},
                )
            self._attribute('inventory.units', sum(reservation.values()))

        return reservation

    def _charge(self, order: Order) -> str:
        attributes = {
            'payment.method': order.payment_method,
            'payment.amount': order.total,
            'payment.currency': order.currency,
        }

        with self._step('charge_payment', attributes):
            try:
                transaction_id = self.gateway.charge(
                    order.id, order.total, order.payment_method
                )
            except PaymentDeclinedException as declined:
                self._attribute('payment.decline_reason', declined.reason)
                raise

            self._attribute('payment.transaction_id', transaction_id)
            self._event('payment.authorized', {'transaction_id': transaction_id})

        return transaction_id

    def _confirm(self, order: Order, receipt: Receipt) -> str:
        with self._step('send_confirmation', {'customer.id': order.customer_id}):
            confirmation_id = self.notifier.send_confirmation(order, receipt)
            self._event('confirmation.sent', {'confirmation.id': confirmation_id})

        return confirmation_id
