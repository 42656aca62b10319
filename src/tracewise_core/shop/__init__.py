"""Example shop instrumented with attributes, events and child spans."""

from tracewise_core.shop.catalogue import CATALOGUE as CATALOGUE
from tracewise_core.shop.inventory import Inventory as Inventory
from tracewise_core.shop.payments import PaymentGateway as PaymentGateway
from tracewise_core.shop.notifier import Notifier as Notifier
from tracewise_core.shop.service import CheckoutService as CheckoutService
from tracewise_core.shop.generator import OrderGenerator as OrderGenerator
from tracewise_core.shop.factory import build_shop as build_shop
