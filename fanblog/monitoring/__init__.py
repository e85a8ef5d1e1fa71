"""
Logging for the fanblog backend.

Usage
-----
>>> from fanblog.monitoring import configure_logging, get_logger
>>> configure_logging()
>>> logger = get_logger(__name__)
"""

from fanblog.monitoring.logging import (
    bind_request_id,
    clear_context,
    configure_logging,
    get_logger,
    sanitize_log_message,
)

__all__ = [
    "bind_request_id",
    "clear_context",
    "configure_logging",
    "get_logger",
    "sanitize_log_message",
]
