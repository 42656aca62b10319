"""
Tracewise Tracing Module.

Provides a Logfire-inspired API for manual Open Telemetry instrumentation.

Usage:
    from tracewise_core.tracing import tracer

    # Configure once at startup
    tracer.configure(config=my_config)

    # Use decorator for automatic instrumentation
    @tracer.instrument("my_operation")
    def my_function():
        ...

    # Use context manager for child spans
    with tracer.span("my_span", key="value"):
        ...

    # Attach attributes and events to the current span
    tracer.set_attribute("order.id", "o-1")
    tracer.info("Something happened", detail="value")

    # Record metrics
    tracer.count("orders.processed", status="ok")
"""

from tracewise_core.tracing.client import (
    TracewiseTracer,
    get_tracer,
    tracer,
)
from tracewise_core.tracing.exporters import (
    EXPORTERS,
    LoggingSpanExporter,
    build_metric_reader,
    build_span_exporter,
    exporter_status,
)
from tracewise_core.tracing.propagation import (
    attached_context,
    extract_context,
    inject_context,
)

__all__ = [
    'EXPORTERS',
    'LoggingSpanExporter',
    'TracewiseTracer',
    'attached_context',
    'build_metric_reader',
    'build_span_exporter',
    'exporter_status',
    'extract_context',
    'get_tracer',
    'inject_context',
    'tracer',
]
