from tracewise_core.exceptions.configuration_exception import (
    ConfigurationException as ConfigurationException,
)
from tracewise_core.exceptions.invalid_order_exception import (
    InvalidOrderException as InvalidOrderException,
)
from tracewise_core.exceptions.out_of_stock_exception import (
    OutOfStockException as OutOfStockException,
)
from tracewise_core.exceptions.payment_declined_exception import (
    PaymentDeclinedException as PaymentDeclinedException,
)
