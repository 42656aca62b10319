from tracewise_core.logging.logger import (
    TRACE_CONTEXT_FORMAT as TRACE_CONTEXT_FORMAT,
    TraceContextFilter as TraceContextFilter,
    create_isolated_logger as create_isolated_logger,
    create_null_logger as create_null_logger,
)
