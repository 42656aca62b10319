from enum import Enum


class Detail(str, Enum):
    """Instrumentation detail of the example shop."""

    BASIC = 'basic'
    DETAILED = 'detailed'


class Exporter(str, Enum):
    """Valid span exporters."""

    MEMORY = 'memory'
    CONSOLE = 'console'
    OTLP = 'otlp'
