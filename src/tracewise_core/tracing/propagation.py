"""W3C Trace Context propagation helpers.

Used to continue a trace across a process boundary: the caller injects the
`traceparent` and `tracestate` headers, the callee extracts them and starts
its spans as children of the remote span.
"""

from contextlib import contextmanager
from typing import Iterator, MutableMapping, Mapping, Optional

from opentelemetry import context as otel_context
from opentelemetry.context import Context
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

_propagator = TraceContextTextMapPropagator()


def inject_context(
    headers: MutableMapping[str, str], context: Optional[Context] = None
) -> MutableMapping[str, str]:
    """Write the trace context headers for `context` (the current one if None).

    Returns the same mapping for chaining. Nothing is written outside a span.
    """
    _propagator.inject(carrier=headers, context=context)
    return headers


def extract_context(headers: Mapping[str, str]) -> Context:
    """Build a context whose current span is the remote span described by `headers`."""
    return _propagator.extract(carrier=headers)


@contextmanager
def attached_context(headers: Mapping[str, str]) -> Iterator[Context]:
    """Make the remote span described by `headers` the parent of spans started inside.

    Example
    -------
    >>> with attached_context(request.headers):
    ...     with tracer.span('handle_request'):
    ...         ...
    """
    extracted = extract_context(headers)
    token = otel_context.attach(extracted)
    try:
        yield extracted
    finally:
        otel_context.detach(token)
