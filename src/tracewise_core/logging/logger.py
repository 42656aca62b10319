import logging
import sys
from datetime import datetime

from opentelemetry import trace


TRACE_CONTEXT_FORMAT = (
    '[%(asctime)s] %(name)s - %(levelname)s - '
    '[trace_id=%(trace_id)s span_id=%(span_id)s] %(message)s'
)


class TraceContextFilter(logging.Filter):
    """Tag log records with the ids of the active span.

    Records emitted outside a valid span get `0` for both ids. The filter
    never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        span_context = trace.get_current_span().get_span_context()

        if span_context.is_valid:
            record.trace_id = trace.format_trace_id(span_context.trace_id)
            record.span_id = trace.format_span_id(span_context.span_id)
        else:
            record.trace_id = '0'
            record.span_id = '0'

        return True


def create_isolated_logger(name: str, level: int = logging.ERROR,
                          log_format: str = None,
                          propagate: bool = False,
                          add_console_handler: bool = True,
                          add_file_handler: bool = False,
                          file_path: str = None,
                          trace_context: bool = False) -> logging.Logger:
    """
    Create an isolated logger that doesn't interfere with other loggers.

    Args:
        name: Logger name (should be unique to your application)
        level: Logging level (default: logging.ERROR)
        log_format: Custom log format string
        propagate: Whether to propagate to parent loggers (default: False)
        add_console_handler: Add console output handler (default: True)
        add_file_handler: Add file output handler (default: False)
        file_path: Path for log file (required if add_file_handler=True)
        trace_context: Tag records with trace_id and span_id of the active span (default: False)

    Returns:
        Configured logger instance
    """

    # Create logger with unique name
    logger = logging.getLogger(name)

    # Prevent interference with other loggers
    logger.propagate = propagate

    # Set logging level
    logger.setLevel(level)

    # Clear any existing handlers and filters to avoid duplicates
    logger.handlers.clear()
    logger.filters.clear()

    # Default format if none provided
    if log_format is None:
        log_format = (
            TRACE_CONTEXT_FORMAT
            if trace_context
            else '[%(asctime)s] %(name)s - %(levelname)s - %(message)s'
        )

    formatter = logging.Formatter(log_format)

    if trace_context:
        logger.addFilter(TraceContextFilter())

    # Add handlers

    if not add_console_handler and not add_file_handler:
        null_handler = logging.NullHandler()
        null_handler.setLevel(level)
        null_handler.setFormatter(formatter)
        logger.addHandler(null_handler)

    if add_console_handler:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if add_file_handler:
        if file_path is None:
            file_path = f"{name}_{datetime.now().strftime('%Y%m%d')}.log"

        file_handler = logging.FileHandler(file_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

def create_null_logger(name: str, level: int = logging.ERROR) -> logging.Logger:
    """
    Create a logger that do not store or output any log messages.

    Args:
        name: Logger name (should be unique to your application)
        level: Logging level (default: logging.ERROR)

    Returns:
        Configured logger instance
    """

    return create_isolated_logger(name=name, level=level, add_console_handler=False, add_file_handler=False)
