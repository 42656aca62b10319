"""Tracewise core: manual Open Telemetry instrumentation toolkit and example shop."""
