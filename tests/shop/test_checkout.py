import logging
from unittest.mock import patch

import pytest
from opentelemetry.trace import StatusCode

from tracewise_core.exceptions import (
    InvalidOrderException,
    OutOfStockException,
    PaymentDeclinedException,
)
from tracewise_core.models import Order, OrderItem, ShopConfig
from tracewise_core.shop import (
    CATALOGUE,
    CheckoutService,
    Inventory,
    Notifier,
    PaymentGateway,
    build_shop,
)


def make_order(*items, method='card', order_id='ord-1'):
    return Order(
        id=order_id,
        customer_id='cus-001',
        items=[
            OrderItem(sku=sku, quantity=quantity, unit_price=CATALOGUE.get(sku, 1.0))
            for sku, quantity in items
        ],
        payment_method=method,
    )


@pytest.fixture
def shop(memory_tracer):
    return CheckoutService(
        inventory=Inventory.with_catalogue(10),
        gateway=PaymentGateway(limit=1000.0),
        notifier=Notifier(),
        tracer=memory_tracer,
    )


class TestCheckout:
    def test_successful_checkout(self, shop):
        receipt = shop.checkout(make_order(('mug-01', 2), ('sticker-pack', 1)))

        assert receipt.order_id == 'ord-1'
        assert receipt.total == 29.5
        assert receipt.reserved == {'mug-01': 2, 'sticker-pack': 1}
        assert receipt.transaction_id.startswith('tx-')
        assert receipt.confirmation_id.startswith('msg-')
        assert shop.inventory.available('mug-01') == 8
        assert len(shop.notifier.outbox) == 1

    def test_empty_order_is_invalid(self, shop):
        with pytest.raises(InvalidOrderException, match='no items'):
            shop.checkout(make_order())

    def test_unknown_item_is_invalid(self, shop):
        with pytest.raises(InvalidOrderException) as exc_info:
            shop.checkout(make_order(('unicorn', 1)))

        assert exc_info.value.details == {'sku': 'unicorn'}

    def test_non_positive_quantity_is_invalid(self, shop):
        with pytest.raises(InvalidOrderException, match='positive'):
            shop.checkout(make_order(('mug-01', 0)))

    def test_out_of_stock(self, shop):
        with pytest.raises(OutOfStockException):
            shop.checkout(make_order(('mug-01', 11)))

        assert shop.inventory.available('mug-01') == 10

    def test_declined_payment_releases_stock(self, shop):
        with pytest.raises(PaymentDeclinedException) as exc_info:
            shop.checkout(make_order(('laptop-15', 1)))

        assert exc_info.value.reason == 'limit_exceeded'
        assert shop.inventory.available('laptop-15') == 10
        assert shop.notifier.outbox == []

    def test_failure_is_logged(self, memory_tracer):
        logger = logging.getLogger('tracewise.tests.checkout')
        service = CheckoutService(
            Inventory.with_catalogue(1),
            PaymentGateway(),
            Notifier(),
            tracer=memory_tracer,
            logger=logger,
        )

        with patch.object(logger, 'warning') as warning:
            with pytest.raises(OutOfStockException):
                service.checkout(make_order(('mug-01', 2)))

        warning.assert_called_once()
        assert 'ord-1' in warning.call_args[0][0]


class TestDetailedInstrumentation:
    def test_successful_trace_shape(self, shop, spans_by_name):
        shop.checkout(make_order(('mug-01', 2), ('sticker-pack', 1)))

        spans = spans_by_name()
        root = spans['checkout']

        assert set(spans) == {
            'checkout',
            'validate_order',
            'reserve_inventory',
            'charge_payment',
            'send_confirmation',
        }
        for name in set(spans) - {'checkout'}:
            assert spans[name].parent.span_id == root.context.span_id

        assert root.attributes['order.id'] == 'ord-1'
        assert root.attributes['order.items.count'] == 3
        assert root.attributes['order.total'] == 29.5
        assert root.attributes['order.currency'] == 'EUR'
        assert root.attributes['customer.id'] == 'cus-001'
        assert root.attributes['payment.method'] == 'card'
        assert root.attributes['checkout.transaction_id'].startswith('tx-')

    def test_step_attributes_and_events(self, shop, spans_by_name):
        shop.checkout(make_order(('mug-01', 2), ('sticker-pack', 1)))

        spans = spans_by_name()

        validate = spans['validate_order']
        assert [e.name for e in validate.events] == ['order.validated']

        reserve = spans['reserve_inventory']
        assert tuple(reserve.attributes['inventory.skus']) == ('mug-01', 'sticker-pack')
        assert reserve.attributes['inventory.units'] == 3
        reserved = [dict(e.attributes) for e in reserve.events]
        assert reserved == [
            {'sku': 'mug-01', 'quantity': 2, 'remaining': 8},
            {'sku': 'sticker-pack', 'quantity': 1, 'remaining': 9},
        ]

        charge = spans['charge_payment']
        assert charge.attributes['payment.method'] == 'card'
        assert charge.attributes['payment.amount'] == 29.5
        assert charge.attributes['payment.currency'] == 'EUR'
        assert charge.attributes['payment.transaction_id'].startswith('tx-')
        assert [e.name for e in charge.events] == ['payment.authorized']

        confirm = spans['send_confirmation']
        assert confirm.attributes['customer.id'] == 'cus-001'
        assert [e.name for e in confirm.events] == ['confirmation.sent']

    def test_declined_payment_trace(self, shop, spans_by_name):
        with pytest.raises(PaymentDeclinedException):
            shop.checkout(make_order(('laptop-15', 1)))

        spans = spans_by_name()
        root = spans['checkout']
        charge = spans['charge_payment']

        assert 'send_confirmation' not in spans
        assert charge.status.status_code == StatusCode.ERROR
        assert charge.attributes['payment.decline_reason'] == 'limit_exceeded'
        assert [e.name for e in charge.events] == ['exception']

        assert root.status.status_code == StatusCode.ERROR
        assert [e.name for e in root.events] == [
            'inventory.released',
            'checkout.failed',
            'exception',
        ]
        assert root.events[0].attributes['inventory.units'] == 1
        failed = root.events[1].attributes
        assert failed['error.type'] == 'PaymentDeclinedException'
        assert 'limit_exceeded' in failed['error.message']
        assert 'checkout.transaction_id' not in root.attributes

    def test_out_of_stock_trace_stops_at_reservation(self, shop, spans_by_name):
        with pytest.raises(OutOfStockException):
            shop.checkout(make_order(('mug-01', 11)))

        spans = spans_by_name()

        assert set(spans) == {'checkout', 'validate_order', 'reserve_inventory'}
        assert spans['reserve_inventory'].status.status_code == StatusCode.ERROR
        assert spans['reserve_inventory'].status.description == (
            'Out of stock for mug-01: requested 11, available 10'
        )


class TestBasicInstrumentation:
    def test_only_the_root_span_is_produced(self, memory_tracer, spans_by_name):
        service = build_shop(ShopConfig(detail='basic'), tracer=memory_tracer)

        service.checkout(make_order(('mug-01', 1)))

        (span,) = memory_tracer.finished_spans()
        assert span.name == 'checkout'
        assert dict(span.attributes) == {}
        assert list(span.events) == []

    def test_failure_still_marks_the_root(self, memory_tracer):
        service = build_shop(ShopConfig(detail='basic'), tracer=memory_tracer)

        with pytest.raises(PaymentDeclinedException):
            service.checkout(make_order(('mug-01', 1), method='wire'))

        (span,) = memory_tracer.finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert [e.name for e in span.events] == ['exception']


class TestCheckoutMetrics:
    def test_processed_orders_are_counted(self, shop, memory_tracer):
        shop.checkout(make_order(('mug-01', 1)))
        with pytest.raises(PaymentDeclinedException):
            shop.checkout(make_order(('mug-01', 1), method='wire', order_id='ord-2'))

        metrics = {
            metric.name: metric
            for resource_metrics in memory_tracer.metrics_data().resource_metrics
            for scope_metrics in resource_metrics.scope_metrics
            for metric in scope_metrics.metrics
        }

        processed = {
            point.attributes['status']: point.value
            for point in metrics['tracewise.orders.processed'].data.data_points
        }
        assert processed == {'ok': 1, 'failed': 1}

        durations = list(metrics['tracewise.checkout.duration'].data.data_points)
        assert sum(point.count for point in durations) == 2


class TestBuildShop:
    def test_uses_shop_settings(self, memory_tracer):
        service = build_shop(
            ShopConfig(initial_stock=3, payment_limit=10.0, detail='basic'),
            tracer=memory_tracer,
        )

        assert service.inventory.available('mug-01') == 3
        assert service.gateway.limit == 10.0
        assert service._detailed is False
