"""Span exporters and metric readers selectable by name."""

import importlib
import logging
from typing import Optional, Sequence

from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    InMemoryMetricReader,
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
    SpanExportResult,
    SpanProcessor,
)
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)

from tracewise_core.exceptions import ConfigurationException
from tracewise_core.models.config import TracewiseTracingConfig

OTLP = 'otlp'
CONSOLE = 'console'
MEMORY = 'memory'

EXPORTERS = (OTLP, CONSOLE, MEMORY)

_EXPORTER_MODULES = {
    OTLP: 'opentelemetry.exporter.otlp.proto.http.trace_exporter',
    CONSOLE: 'opentelemetry.sdk.trace.export',
    MEMORY: 'opentelemetry.sdk.trace.export.in_memory_span_exporter',
}


class LoggingSpanExporter(SpanExporter):
    """A span exporter that wraps another exporter and logs when spans are sent.

    This exporter provides visibility into when traces are being transmitted,
    particularly useful in CLI contexts where users want to know when telemetry
    is sent.
    """

    def __init__(
        self,
        wrapped_exporter: SpanExporter,
        endpoint: str,
        logger: logging.Logger | None = None,
    ):
        self._wrapped_exporter = wrapped_exporter
        self._endpoint = endpoint
        self._logger = logger or logging.getLogger('tracewise')

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        if spans:
            span_count = len(spans)
            self._logger.debug(
                f'Sending {span_count} trace{"s" if span_count > 1 else ""} to {self._endpoint}'
            )
        return self._wrapped_exporter.export(spans)

    def shutdown(self):
        return self._wrapped_exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000):
        return self._wrapped_exporter.force_flush(timeout_millis)


def _ensure_supported(name: str) -> None:
    if name not in EXPORTERS:
        raise ConfigurationException(
            message=f'Unknown exporter [{name}]',
            setting='exporter',
            details={'supported': list(EXPORTERS)},
        )


def _auth_headers(config: TracewiseTracingConfig) -> dict[str, str]:
    if not config.api_key:
        return {}
    return {config.authentication_header: config.api_key.get_secret_value()}


def _otlp_compression(config: TracewiseTracingConfig):
    from opentelemetry.exporter.otlp.proto.http import Compression

    return Compression.Gzip if config.use_compression else Compression.NoCompression


def build_span_exporter(
    name: str,
    config: TracewiseTracingConfig,
    logger: Optional[logging.Logger] = None,
    verbose: bool = False,
) -> tuple[SpanExporter, type[SpanProcessor]]:
    """Create the span exporter registered under `name`.

    Parameters
    ----------
    name : str
        One of `EXPORTERS`.
    config : TracewiseTracingConfig
        Tracing settings, used for the OTLP endpoint and credentials.
    logger : logging.Logger, optional
        Logger used by the verbose OTLP exporter.
    verbose : bool, optional
        Log every batch sent to the collector. Only applies to OTLP.

    Returns
    -------
    tuple[SpanExporter, type[SpanProcessor]]
        The exporter and the span processor class that should drive it.

    Raises
    ------
    ConfigurationException
        If `name` is not a known exporter.
    """
    _ensure_supported(name)

    if name == CONSOLE:
        return ConsoleSpanExporter(), SimpleSpanProcessor

    if name == MEMORY:
        return InMemorySpanExporter(), SimpleSpanProcessor

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )

    otlp_exporter = OTLPSpanExporter(
        endpoint=config.traces_endpoint,
        headers=_auth_headers(config),
        timeout=config.timeout_seconds,
        compression=_otlp_compression(config),
    )

    exporter = (
        LoggingSpanExporter(otlp_exporter, config.endpoint, logger)
        if verbose
        else otlp_exporter
    )

    return exporter, BatchSpanProcessor


def build_metric_reader(name: str, config: TracewiseTracingConfig) -> MetricReader:
    """Create the metric reader matching the span exporter `name`."""
    _ensure_supported(name)

    if name == MEMORY:
        return InMemoryMetricReader()

    if name == CONSOLE:
        return PeriodicExportingMetricReader(
            exporter=ConsoleMetricExporter(),
            export_interval_millis=config.metrics_export_interval_millis,
        )

    from opentelemetry.exporter.otlp.proto.http.metric_exporter import (
        OTLPMetricExporter,
    )

    return PeriodicExportingMetricReader(
        exporter=OTLPMetricExporter(
            endpoint=config.metrics_endpoint,
            headers=_auth_headers(config),
            timeout=config.timeout_seconds,
            compression=_otlp_compression(config),
        ),
        export_interval_millis=config.metrics_export_interval_millis,
    )


def exporter_status(name: str) -> tuple[bool, str]:
    """Check whether the package backing an exporter can be imported.

    Returns
    -------
    tuple[bool, str]
        Readiness flag and, when not ready, the missing module.
    """
    _ensure_supported(name)

    try:
        importlib.import_module(_EXPORTER_MODULES[name])
    except ImportError as e:
        return False, getattr(e, 'name', None) or _EXPORTER_MODULES[name]

    return True, ''
