from typing import Optional


class InvalidOrderException(Exception):
    """Exception raised when an order cannot be accepted by the checkout.

    Attributes
    ----------
    message : str
        Explanation of the validation error
    order_id : str
        Identifier of the rejected order
    details : dict, optional
        Additional details, such as the offending SKU
    """

    def __init__(
        self,
        message: str,
        order_id: str,
        details: Optional[dict] = None,
    ):
        """Initialize the invalid order error.

        Parameters
        ----------
        message : str
            Human-readable error message
        order_id : str
            Identifier of the rejected order
        details : dict, optional
            Additional error details, by default None
        """
        self.message = message
        self.order_id = order_id
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        base_message = f'Order {self.order_id} is invalid: {self.message}'
        if self.details:
            return f'{base_message}\nDetails: {self.details}'
        return base_message
