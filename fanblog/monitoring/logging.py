"""
Structured logging for the blog engine.

This module wires structlog on top of the standard library logging so that
both ``structlog`` loggers and third party ``logging`` loggers end up in
the same handlers:

- Pretty console output for development
- JSON output for every other environment
- Optional rotating file handler
- Request ID correlation through context variables

Examples
--------
>>> from fanblog.monitoring import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Post created", post_id=12, slug="hello-world")
"""

from datetime import UTC, datetime
from logging import INFO, StreamHandler, root
from logging.handlers import RotatingFileHandler
from pathlib import Path

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.dev import ConsoleRenderer
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from fanblog.configs.settings import settings

# Characters to escape to prevent log injection
CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def sanitize_log_message(message: str) -> str:
    r"""
    Remove control characters from log messages.

    Examples
    --------
    >>> sanitize_log_message("Hello\nWorld")
    'Hello\\nWorld'
    """
    return message.translate(CONTROL_CHARS)


def add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add an ISO 8601 UTC timestamp to the log entry."""
    event_dict["timestamp"] = datetime.now(tz=UTC).isoformat(timespec="seconds")
    return event_dict


def sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Escape control characters in every string value of the event."""
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = sanitize_log_message(value)
    return event_dict


def get_renderer(*, colors: bool = True) -> Processor:
    """
    Get the final renderer for the current environment.

    Args:
        colors: Whether to enable colors in the console renderer.

    Returns:
        ConsoleRenderer in development, JSONRenderer otherwise.
    """
    if settings.ENVIRONMENT == "development":
        return ConsoleRenderer(colors=colors, pad_level=False)
    return JSONRenderer()


def _formatter(*, colors: bool) -> ProcessorFormatter:
    return ProcessorFormatter(
        processors=[
            ProcessorFormatter.remove_processors_meta,
            sanitize_event_dict,
            get_renderer(colors=colors),
        ],
        foreign_pre_chain=[
            add_log_level,
            add_timestamp,
            ExtraAdder(),
        ],
    )


def configure_logging() -> None:
    """Configure structured logging for the application."""
    # Clear existing root handlers to prevent duplicates on reload
    root.handlers.clear()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            add_timestamp,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_handler = StreamHandler()
    console_handler.setFormatter(_formatter(colors=True))
    root.addHandler(console_handler)
    configure_file_logging()


def configure_file_logging() -> None:
    """Attach a rotating file handler when file logging is enabled."""
    if not settings.LOG_TO_FILE:
        return

    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
    )
    file_handler.setLevel(INFO)
    file_handler.setFormatter(_formatter(colors=False))
    root.addHandler(file_handler)


def get_logger(name: str) -> BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: The name of the logger (typically __name__).

    Returns:
        structlog logger bound to ``name``.
    """
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    """Bind a request ID to the current logging context."""
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    """Clear all bound context variables."""
    clear_contextvars()
