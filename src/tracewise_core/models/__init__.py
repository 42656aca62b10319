# Use an explicit re-export https://github.com/astral-sh/ruff/issues/5697#issuecomment-1631647211

from tracewise_core.models.models import (
    OrderItem as OrderItem,
    Order as Order,
    Receipt as Receipt,
)

from tracewise_core.models.config import (
    TracewiseConfig as TracewiseConfig,
    TracewiseTracingConfig as TracewiseTracingConfig,
    ShopConfig as ShopConfig,
)
