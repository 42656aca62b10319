import logging
from typing import Optional

from tracewise_core.models import ShopConfig
from tracewise_core.shop.inventory import Inventory
from tracewise_core.shop.notifier import Notifier
from tracewise_core.shop.payments import PaymentGateway
from tracewise_core.shop.service import CheckoutService
from tracewise_core.tracing import TracewiseTracer


def build_shop(
    config: Optional[ShopConfig] = None,
    tracer: Optional[TracewiseTracer] = None,
    logger: Optional[logging.Logger] = None,
) -> CheckoutService:
    """Wire a checkout service with a fully stocked inventory.

    Example
    -------
    >>> shop = build_shop(ShopConfig(detail='basic'))
    >>> receipt = shop.checkout(order)
    """
    config = config or ShopConfig()

    return CheckoutService(
        inventory=Inventory.with_catalogue(config.initial_stock),
        gateway=PaymentGateway(limit=config.payment_limit, latency_ms=config.latency_ms),
        notifier=Notifier(latency_ms=config.latency_ms),
        tracer=tracer,
        detail=config.detail,
        logger=logger,
    )
