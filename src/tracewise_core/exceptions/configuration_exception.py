from typing import Optional


class ConfigurationException(Exception):
    """Exception raised when the tracing setup is invalid.

    Attributes
    ----------
    message : str
        Explanation of the configuration error
    setting : str
        Name of the offending setting (e.g., 'exporter')
    details : dict, optional
        Additional details, such as the accepted values

    Example
    ---------
    try:
        raise ConfigurationException(
            message="Unknown exporter [zipkin]",
            setting="exporter",
            details={"supported": ["otlp", "console", "memory"]}
        )
    except ConfigurationException as e:
        print(e)  # Will print: "Invalid configuration for exporter: Unknown exporter [zipkin]"
    """

    def __init__(
        self,
        message: str,
        setting: str,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.setting = setting
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        base_message = f'Invalid configuration for {self.setting}: {self.message}'
        if self.details:
            return f'{base_message}\nDetails: {self.details}'
        return base_message
