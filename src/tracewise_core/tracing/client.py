"""
Tracewise Tracer Client.

This module provides a lightweight, decorator-based API for manual
instrumentation on top of Open Telemetry: child spans, span attributes and
span events without boilerplate.

Usage:
    from tracewise_core.tracing import tracer

    # Decorator - auto-captures args and return value
    @tracer.instrument("reserve_inventory")
    def reserve(self, items):
        ...

    # Context manager for child spans
    with tracer.span("charge_payment", _attributes={"payment.method": "card"}):
        ...

    # Attributes and events on the current span
    tracer.set_attribute("order.total", 42.5)
    tracer.info("Payment authorized", transaction_id="tx-1")

    # Metrics
    tracer.count("orders.completed", status="ok")
"""

from __future__ import annotations

import inspect
import logging
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, TypeVar, ParamSpec

from opentelemetry import trace, metrics
from opentelemetry.trace import Link, Span, SpanKind, Tracer, StatusCode
from opentelemetry.metrics import Meter, Counter, Histogram
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import SpanExporter
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader, MetricReader

from tracewise_core.models.config import TracewiseConfig, TracewiseTracingConfig
from tracewise_core.tracing.attributes import (
    normalize_attributes,
    serialize_args,
    to_attribute_value,
)
from tracewise_core.tracing.exporters import build_metric_reader, build_span_exporter

P = ParamSpec('P')
R = TypeVar('R')


class TracewiseTracer:
    """Tracewise tracing client.

    Provides a simple, ergonomic API for tracing with decorators, context managers,
    span attributes and span events.

    Attributes:
        _tracer: The underlying OpenTelemetry tracer
        _meter: The underlying OpenTelemetry meter
        _tracer_provider: The provider owning span processors, None until configured
        _meter_provider: The provider owning metric readers, None until configured
        _span_exporter: The configured span exporter, if tracing is enabled
        _metric_reader: The configured metric reader, if metrics are enabled
        _logger: Logger for verbose output
        _initialized: Whether the tracer has been configured
        _enabled: Whether tracing is enabled
        _counters: Cache of created counters
        _histograms: Cache of created histograms
    """

    def __init__(self, name: str = 'tracewise'):
        self._name = name
        self._tracer: Tracer | None = None
        self._meter: Meter | None = None
        self._tracer_provider: TracerProvider | None = None
        self._meter_provider: MeterProvider | None = None
        self._span_exporter: SpanExporter | None = None
        self._metric_reader: MetricReader | None = None
        self._logger: logging.Logger = logging.getLogger('tracewise')
        self._initialized: bool = False
        self._enabled: bool = False
        self._exporter_name: str | None = None
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}

    def configure(
        self,
        config: TracewiseConfig | None = None,
        logger: logging.Logger | None = None,
        verbose: bool | None = None,
    ) -> TracewiseTracer:
        """Configure the tracer with the given settings.

        This method should be called once during application startup.
        Subsequent calls are ignored until `shutdown()` is called.

        Parameters
        ----------
        config : TracewiseConfig, optional
            Configuration containing tracing settings. If None, creates default config.
        logger : logging.Logger, optional
            Logger for trace notifications. Uses 'tracewise' logger if not provided.
        verbose : bool, optional
            If True, logs when traces are sent. Defaults to the `verbose` tracing setting.

        Returns
        -------
        TracewiseTracer
            Self for method chaining.

        Raises
        ------
        ConfigurationException
            If the configured exporter is unknown.
        """
        if self._initialized:
            return self

        if logger:
            self._logger = logger

        config = config or TracewiseConfig()
        tracing_config: TracewiseTracingConfig = config.tracing

        if verbose is None:
            verbose = tracing_config.verbose

        resource = Resource.create(self._resource_attributes(tracing_config))

        trace_provider = TracerProvider(
            resource=resource,
            sampler=ParentBased(root=TraceIdRatioBased(tracing_config.sample_ratio)),
        )
        exporter = None
        metric_reader = None

        if tracing_config.enable:
            exporter, processor_class = build_span_exporter(
                tracing_config.exporter,
                tracing_config,
                logger=self._logger,
                verbose=verbose,
            )
            if tracing_config.enable_metrics:
                metric_reader = build_metric_reader(
                    tracing_config.exporter, tracing_config
                )

            trace_provider.add_span_processor(processor_class(exporter))

        metric_readers = [metric_reader] if metric_reader is not None else []
        meter_provider = MeterProvider(resource=resource, metric_readers=metric_readers)

        if tracing_config.set_global_provider:
            trace.set_tracer_provider(trace_provider)
            metrics.set_meter_provider(meter_provider)

        self._enabled = tracing_config.enable
        self._exporter_name = tracing_config.exporter if tracing_config.enable else None
        self._span_exporter = exporter
        self._metric_reader = metric_reader
        self._tracer_provider = trace_provider
        self._meter_provider = meter_provider
        self._tracer = trace_provider.get_tracer(self._name)
        self._meter = meter_provider.get_meter(self._name)
        self._counters = {}
        self._histograms = {}

        self._logger.debug(
            f'Tracing configured for [{tracing_config.service_name}] '
            f'(enabled: {self._enabled}, exporter: {self._exporter_name})'
        )

        self._initialized = True
        return self

    @staticmethod
    def _resource_attributes(config: TracewiseTracingConfig) -> dict[str, str]:
        attributes = {SERVICE_NAME: config.service_name}
        if config.service_version:
            attributes[SERVICE_VERSION] = config.service_version
        attributes.update(config.resource_attributes)
        return attributes

    @property
    def is_configured(self) -> bool:
        """Check if the tracer has been configured."""
        return self._initialized

    @property
    def is_enabled(self) -> bool:
        """Check if tracing is enabled."""
        return self._enabled

    @property
    def exporter_name(self) -> str | None:
        """The name of the active exporter, None when tracing is disabled."""
        return self._exporter_name

    def _ensure_initialized(self) -> None:
        """Ensure tracer is initialized, using the global providers if not configured."""
        if self._tracer is None:
            self._tracer = trace.get_tracer(self._name)
        if self._meter is None:
            self._meter = metrics.get_meter(self._name)

    @staticmethod
    def _mark_failed(span: Span, exc: BaseException) -> None:
        span.set_status(StatusCode.ERROR, str(exc))
        span.record_exception(exc, escaped=True)

    @contextmanager
    def _active_span(
        self,
        name: str,
        attributes: dict[str, Any],
        kind: SpanKind = SpanKind.INTERNAL,
        links: Optional[Sequence[Link]] = None,
    ) -> Iterator[Span]:
        """Start a span as child of the current one and make it current.

        Exceptions are recorded here, so the SDK's own recording is disabled to
        keep a single exception event per span.
        """
        self._ensure_initialized()

        with self._tracer.start_as_current_span(
            name,
            kind=kind,
            attributes=attributes,
            links=links,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                yield span
            except Exception as exc:
                self._mark_failed(span, exc)
                raise

    # -------------------------------------------------------------------------
    # Decorator API
    # -------------------------------------------------------------------------

    def instrument(
        self,
        name: str | None = None,
        *,
        capture_args: bool = True,
        capture_return: bool = True,
        exclude_args: set[str] | None = None,
        max_arg_length: int = 1000,
        max_return_length: int = 10000,
        kind: SpanKind = SpanKind.INTERNAL,
    ) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """Decorator to automatically instrument a function with tracing.

        Creates a span around the function call and optionally captures arguments
        and return values as span attributes. Coroutine functions are supported.

        Parameters
        ----------
        name : str, optional
            Span name. Defaults to function name.
        capture_args : bool, optional
            Whether to capture function arguments. Default True.
        capture_return : bool, optional
            Whether to capture return value. Default True.
        exclude_args : set[str], optional
            Argument names to exclude from capture. Always excludes 'self', 'cls'.
        max_arg_length : int, optional
            Max length for serialized arguments. Default 1000.
        max_return_length : int, optional
            Max length for serialized return value. Default 10000.
        kind : SpanKind, optional
            The span kind. Default INTERNAL.

        Returns
        -------
        Callable
            Decorated function.

        Example
        -------
        >>> @tracer.instrument('charge_payment', exclude_args={'card_number'})
        ... def charge(self, order_id: str, amount: float, card_number: str) -> str:
        ...     return gateway.charge(order_id, amount, card_number)
        """
        exclude = (exclude_args or set()) | {'self', 'cls'}

        def decorator(func: Callable[P, R]) -> Callable[P, R]:
            span_name = name or func.__name__

            def start_attributes(args: tuple, kwargs: dict) -> dict[str, Any]:
                attributes: dict[str, Any] = {'code.function': func.__qualname__}
                if capture_args:
                    attributes.update(
                        serialize_args(func, args, kwargs, exclude, max_arg_length)
                    )
                return attributes

            def record_return(span: Span, result: Any) -> None:
                if capture_return and result is not None:
                    value = to_attribute_value(result, max_return_length)
                    if value is not None:
                        span.set_attribute('return', value)

            if inspect.iscoroutinefunction(func):

                @wraps(func)
                async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                    with self._active_span(
                        span_name, start_attributes(args, kwargs), kind
                    ) as span:
                        result = await func(*args, **kwargs)
                        record_return(span, result)
                        return result

                return async_wrapper

            @wraps(func)
            def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                with self._active_span(
                    span_name, start_attributes(args, kwargs), kind
                ) as span:
                    result = func(*args, **kwargs)
                    record_return(span, result)
                    return result

            return wrapper

        return decorator

    # -------------------------------------------------------------------------
    # Context Manager API
    # -------------------------------------------------------------------------

    @contextmanager
    def span(
        self,
        name: str,
        _attributes: Mapping[str, Any] | None = None,
        _kind: SpanKind = SpanKind.INTERNAL,
        _links: Sequence[Link] | None = None,
        **attributes: Any,
    ) -> Iterator[Span]:
        """Create a child span of the current span as a context manager.

        Parameters
        ----------
        name : str
            Name of the span.
        _attributes : Mapping[str, Any], optional
            Attributes whose keys are not valid Python identifiers, e.g. `order.id`.
        _kind : SpanKind, optional
            The span kind. Default INTERNAL.
        _links : Sequence[Link], optional
            Links to spans of other traces.
        **attributes : Any
            Additional attributes to attach to the span. Values are normalized
            and `None` values are dropped.

        Yields
        ------
        Span
            The OpenTelemetry span.

        Example
        -------
        >>> with tracer.span('reserve_inventory', _attributes={'order.id': 'o-1'}) as span:
        ...     reservation = inventory.reserve(order.items)
        ...     span.set_attribute('inventory.units', sum(reservation.values()))
        """
        merged = {**(_attributes or {}), **attributes}

        with self._active_span(
            name, normalize_attributes(merged), _kind, _links
        ) as span:
            yield span

    # -------------------------------------------------------------------------
    # Attributes API
    # -------------------------------------------------------------------------

    def get_current_span(self) -> Span | None:
        """Get the current active span, if it is recording."""
        span = trace.get_current_span()
        return span if span and span.is_recording() else None

    def set_attribute(self, key: str, value: Any) -> None:
        """Set an attribute on the current span.

        Parameters
        ----------
        key : str
            Attribute key.
        value : Any
            Attribute value (will be serialized if needed). None is ignored.
        """
        span = self.get_current_span()
        if span is None:
            return

        converted = to_attribute_value(value)
        if converted is not None:
            span.set_attribute(key, converted)

    def set_attributes(
        self, attributes: Mapping[str, Any], prefix: str | None = None
    ) -> None:
        """Set many attributes on the current span, flattening nested mappings.

        Example
        -------
        >>> tracer.set_attributes({'id': 'o-1', 'total': 42.5}, prefix='order')
        """
        span = self.get_current_span()
        if span is None:
            return

        span.set_attributes(normalize_attributes(attributes, prefix))

    # -------------------------------------------------------------------------
    # Events API
    # -------------------------------------------------------------------------

    def add_event(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
        timestamp: int | None = None,
    ) -> None:
        """Add an event to the current span.

        Parameters
        ----------
        name : str
            Event name, e.g. `inventory.reserved`.
        attributes : Mapping[str, Any], optional
            Event attributes, normalized like span attributes.
        timestamp : int, optional
            Event time in nanoseconds since the epoch. Defaults to now.
        """
        self._ensure_initialized()

        span = self.get_current_span()
        if span is None:
            return

        span.add_event(
            name, attributes=normalize_attributes(attributes), timestamp=timestamp
        )

    def _log_event(self, level: str, message: str, **attributes: Any) -> None:
        """Add an event to the current span with structured attributes."""
        self.add_event(message, {**attributes, 'level': level})

    def info(self, message: str, **attributes: Any) -> None:
        """Log an info event to the current span.

        Example
        -------
        >>> tracer.info('Payment authorized', transaction_id='tx-1')
        """
        self._log_event('info', message, **attributes)

    def debug(self, message: str, **attributes: Any) -> None:
        """Log a debug event to the current span."""
        self._log_event('debug', message, **attributes)

    def warn(self, message: str, **attributes: Any) -> None:
        """Log a warning event to the current span."""
        self._log_event('warn', message, **attributes)

    def error(self, message: str, **attributes: Any) -> None:
        """Log an error event to the current span."""
        self._log_event('error', message, **attributes)

    def record_exception(self, exc: BaseException, escaped: bool = False) -> None:
        """Record a handled exception on the current span and mark it as failed."""
        span = self.get_current_span()
        if span is None:
            return

        span.set_status(StatusCode.ERROR, str(exc))
        span.record_exception(exc, escaped=escaped)

    def current_trace_id(self) -> str | None:
        """Hex id of the current trace, None outside a span."""
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return None
        return trace.format_trace_id(span_context.trace_id)

    def current_span_id(self) -> str | None:
        """Hex id of the current span, None outside a span."""
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return None
        return trace.format_span_id(span_context.span_id)

    # -------------------------------------------------------------------------
    # Metrics API
    # -------------------------------------------------------------------------

    def _get_counter(self, name: str, description: str = '', unit: str = '') -> Counter:
        """Get or create a counter metric."""
        full_name = f'tracewise.{name}'
        if full_name not in self._counters:
            self._ensure_initialized()
            self._counters[full_name] = self._meter.create_counter(
                name=full_name,
                description=description,
                unit=unit,
            )
        return self._counters[full_name]

    def _get_histogram(
        self, name: str, description: str = '', unit: str = ''
    ) -> Histogram:
        """Get or create a histogram metric."""
        full_name = f'tracewise.{name}'
        if full_name not in self._histograms:
            self._ensure_initialized()
            self._histograms[full_name] = self._meter.create_histogram(
                name=full_name,
                description=description,
                unit=unit,
            )
        return self._histograms[full_name]

    def count(
        self,
        name: str,
        value: int = 1,
        *,
        description: str = '',
        unit: str = '',
        **labels: str,
    ) -> None:
        """Increment a counter metric.

        Parameters
        ----------
        name : str
            Counter name (will be prefixed with 'tracewise.').
        value : int, optional
            Amount to increment. Default 1.
        description : str, optional
            Counter description (used on first creation).
        unit : str, optional
            Unit of measurement.
        **labels : str
            Labels/attributes for the metric.

        Example
        -------
        >>> tracer.count('orders.processed', status='ok')
        """
        counter = self._get_counter(name, description, unit)
        counter.add(value, labels)

    def histogram(
        self,
        name: str,
        value: float,
        *,
        description: str = '',
        unit: str = '',
        **labels: str,
    ) -> None:
        """Record a histogram measurement.

        Example
        -------
        >>> tracer.histogram('checkout.duration', 12.5, unit='ms', status='ok')
        """
        hist = self._get_histogram(name, description, unit)
        hist.record(value, labels)

    # -------------------------------------------------------------------------
    # Lifecycle and inspection
    # -------------------------------------------------------------------------

    def finished_spans(self) -> tuple[ReadableSpan, ...]:
        """Spans collected by the in-memory exporter, empty for other exporters."""
        if isinstance(self._span_exporter, InMemorySpanExporter):
            return tuple(self._span_exporter.get_finished_spans())
        return ()

    def clear_finished_spans(self) -> None:
        """Forget the spans collected by the in-memory exporter."""
        if isinstance(self._span_exporter, InMemorySpanExporter):
            self._span_exporter.clear()

    def metrics_data(self):
        """Metrics collected by the in-memory reader, None for other readers."""
        if isinstance(self._metric_reader, InMemoryMetricReader):
            return self._metric_reader.get_metrics_data()
        return None

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Export all pending spans and metrics."""
        flushed = True
        if self._tracer_provider is not None:
            flushed = self._tracer_provider.force_flush(timeout_millis)
        if self._meter_provider is not None:
            flushed = self._meter_provider.force_flush(timeout_millis) and flushed
        return flushed

    def shutdown(self) -> None:
        """Flush and release the providers. The tracer can then be configured again."""
        if self._tracer_provider is not None:
            self._tracer_provider.shutdown()
        if self._meter_provider is not None:
            self._meter_provider.shutdown()

        self._tracer = None
        self._meter = None
        self._tracer_provider = None
        self._meter_provider = None
        self._span_exporter = None
        self._metric_reader = None
        self._initialized = False
        self._enabled = False
        self._exporter_name = None
        self._counters = {}
        self._histograms = {}


# Global singleton instance
_tracer_instance: TracewiseTracer | None = None


def get_tracer() -> TracewiseTracer:
    """Get the global TracewiseTracer instance.

    Returns
    -------
    TracewiseTracer
        The singleton tracer instance.
    """
    global _tracer_instance
    if _tracer_instance is None:
        _tracer_instance = TracewiseTracer()
    return _tracer_instance


# Convenience alias for cleaner imports
tracer = get_tracer()
