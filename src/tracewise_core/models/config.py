from typing import Literal, Optional

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

from pydantic import Field, SecretStr


class BaseConfig(BaseSettings):
    """Base class for configuration values."""

    pass


class TracewiseTracingConfig(BaseConfig):
    """Configuration values for Tracewise observability based on Open Telemetry. All env variables must start with tracewise_tracing_"""

    enable: bool = False
    """Record and export spans. When False spans are still created but never leave the process. Default False."""

    exporter: Literal['otlp', 'console', 'memory'] = 'otlp'
    """Where finished spans are sent. 'memory' keeps them in process for inspection. Default 'otlp'."""

    service_name: str = 'tracewise-shop'
    """The value of the `service.name` resource attribute."""

    service_version: Optional[str] = None
    """The value of the `service.version` resource attribute, if any."""

    resource_attributes: dict[str, str] = Field(default_factory=dict)
    """Additional resource attributes attached to every span, e.g. `deployment.environment`."""

    api_key: Optional[SecretStr] = Field(exclude=True, default=None)
    """The authentication key (used for both traces and metrics)."""

    authentication_header: str = 'Authorization'
    """The header in which the api key needs to be included for authentication purposes."""

    endpoint: str = 'http://localhost:4318/'
    """The base url of the Open Telemetry collector endpoint."""

    traces_endpoint: str = Field(
        default_factory=lambda data: f'{data["endpoint"].rstrip("/")}/v1/traces'
    )
    """The endpoint for the traces exporter. Default 'http://localhost:4318/v1/traces'."""

    metrics_endpoint: str = Field(
        default_factory=lambda data: f'{data["endpoint"].rstrip("/")}/v1/metrics'
    )
    """The endpoint for the metrics exporter. Default 'http://localhost:4318/v1/metrics'."""

    timeout_seconds: int = 10
    """The client timeout when sending traces. Default 10 seconds."""

    use_compression: bool = True
    """The client should gzip traces before send. Default True."""

    enable_metrics: bool = False
    """Enable sending metrics to the telemetry service. Default False."""

    metrics_export_interval_millis: int = 60000
    """The interval at which metrics are exported. Default 60 seconds."""

    sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)
    """Fraction of new traces to sample. Child spans follow their parent decision. Default 1.0."""

    verbose: bool = True
    """Log when traces are sent. Useful for CLI to show telemetry activity. Default True."""

    set_global_provider: bool = True
    """Register the providers as the Open Telemetry globals. Default True."""

    model_config = SettingsConfigDict(
        env_prefix='tracewise_tracing_',
        env_file='.env',
        extra='ignore',
        nested_model_default_partial_update=True,
    )


class ShopConfig(BaseConfig):
    """Configuration values for the example shop. All env variables must start with tracewise_shop_"""

    detail: Literal['basic', 'detailed'] = 'detailed'
    """Instrumentation detail. 'basic' produces only the checkout span, as automatic instrumentation would."""

    initial_stock: int = Field(default=25, ge=0)
    """Units in stock for each catalogue item when the shop starts."""

    payment_limit: float = Field(default=5000.0, gt=0)
    """Charges above this amount are declined by the payment gateway."""

    latency_ms: int = Field(default=0, ge=0)
    """Simulated latency of each downstream call, in milliseconds."""

    model_config = SettingsConfigDict(
        env_prefix='tracewise_shop_', env_file='.env', extra='ignore'
    )


class TracewiseConfig(BaseConfig):
    """Configuration values for Tracewise. All env variables must start with tracewise_"""

    logging_level: Optional[int] = logging.INFO
    """The logging level. Default "logging.INFO"."""

    logging_file: Optional[str] = None
    """The log file path. Specify to save logs to file. Default "None"."""

    theme: Optional[Literal['light', 'dark']] = None
    """The console theme to use. Set to 'light' for light terminals or 'dark' for dark terminals. Default None (auto-detect)."""

    tracing: TracewiseTracingConfig = Field(default_factory=TracewiseTracingConfig)
    """Tracing configuration"""

    shop: ShopConfig = Field(default_factory=ShopConfig)
    """Example shop configuration"""

    model_config = SettingsConfigDict(
        env_prefix='tracewise_',
        env_file='.env',
        extra='ignore',
        nested_model_default_partial_update=True,
    )
