from typing import Literal, Optional


class PaymentDeclinedException(Exception):
    """Exception raised when the payment gateway refuses a charge.

    Attributes
    ----------
    message : str
        Explanation of the refusal
    reason : str
        Machine readable reason, either `limit_exceeded` or `unsupported_method`
    details : dict, optional
        Additional details, such as the amount and the limit

    Example
    ---------
    try:
        raise PaymentDeclinedException(
            message="Amount 7200.00 exceeds the limit",
            reason="limit_exceeded",
            details={"amount": 7200.0, "limit": 5000.0}
        )
    except PaymentDeclinedException as e:
        print(e)  # Will print: "Payment declined (limit_exceeded): Amount 7200.00 exceeds the limit"
    """

    def __init__(
        self,
        message: str,
        reason: Literal['limit_exceeded', 'unsupported_method'],
        details: Optional[dict] = None,
    ):
        self.message = message
        self.reason = reason
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        base_message = f'Payment declined ({self.reason}): {self.message}'
        if self.details:
            return f'{base_message}\nDetails: {self.details}'
        return base_message
