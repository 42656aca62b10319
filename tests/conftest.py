import pytest

from tracewise_core.models import TracewiseConfig, TracewiseTracingConfig
from tracewise_core.tracing import TracewiseTracer


def memory_config(**tracing) -> TracewiseConfig:
    """Configuration recording spans in memory, without touching the global providers."""
    settings = {
        'enable': True,
        'exporter': 'memory',
        'set_global_provider': False,
        'verbose': False,
        **tracing,
    }
    return TracewiseConfig(tracing=TracewiseTracingConfig(**settings))


@pytest.fixture
def memory_tracer():
    """Fixture providing a tracer that keeps finished spans in memory."""
    tracer = TracewiseTracer().configure(memory_config(enable_metrics=True))
    yield tracer
    tracer.shutdown()


@pytest.fixture
def spans_by_name(memory_tracer):
    """Fixture returning a callable that maps finished span names to spans."""

    def collect():
        return {span.name: span for span in memory_tracer.finished_spans()}

    return collect


@pytest.fixture
def make_tracer():
    """Fixture building in-memory tracers with custom tracing settings."""
    tracers = []

    def build(**tracing) -> TracewiseTracer:
        tracer = TracewiseTracer().configure(memory_config(**tracing))
        tracers.append(tracer)
        return tracer

    yield build

    for tracer in tracers:
        tracer.shutdown()
