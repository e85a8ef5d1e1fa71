# tests/monitoring/test_logging.py
"""Tests for structured logging functionality."""

from logging import root
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from structlog.contextvars import get_contextvars

from fanblog.configs import settings
from fanblog.monitoring import bind_request_id, clear_context, configure_logging, get_logger
from fanblog.monitoring.logging import add_timestamp, sanitize_event_dict, sanitize_log_message


class TestSanitizeLogMessage:
    """Tests for log message sanitization."""

    def test_control_chars_escaped(self) -> None:
        """Newlines, carriage returns and tabs should be escaped."""
        result = sanitize_log_message("Line1\nLine2\rLine3\tEnd")
        assert result == "Line1\\nLine2\\rLine3\\tEnd"

    def test_null_byte_dropped(self) -> None:
        """Null bytes should be removed."""
        assert sanitize_log_message("a\x00b") == "ab"

    def test_normal_message_unchanged(self) -> None:
        """Normal messages should be unchanged."""
        message = "Post created successfully"
        assert sanitize_log_message(message) == message


class TestProcessors:
    """Tests for the custom structlog processors."""

    def test_sanitize_event_dict_strings_only(self) -> None:
        """Only string values should be sanitized."""
        event = {"event": "Slug\ninjected", "post_id": 3}
        result = sanitize_event_dict(None, "info", event)
        assert result == {"event": "Slug\\ninjected", "post_id": 3}

    def test_add_timestamp(self) -> None:
        """A UTC ISO timestamp should be added."""
        result = add_timestamp(None, "info", {"event": "x"})
        assert result["timestamp"].endswith("+00:00")


class TestContextVariables:
    """Tests for request id correlation."""

    def test_bind_and_clear_request_id(self) -> None:
        """The request id should be bound and then cleared."""
        bind_request_id("req-42")
        assert get_contextvars()["request_id"] == "req-42"
        clear_context()
        assert "request_id" not in get_contextvars()


class TestConfigureLogging:
    """Tests for handler setup."""

    def test_console_handler_only(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without file logging a single console handler should be attached."""
        monkeypatch.setattr(settings, "LOG_TO_FILE", False)
        configure_logging()
        assert len(root.handlers) == 1
        get_logger(__name__).info("configured", component="test")

    def test_file_handler(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """File logging should add a rotating handler and create the directory."""
        log_file = tmp_path / "logs" / "fanblog.log"
        monkeypatch.setattr(settings, "LOG_TO_FILE", True)
        monkeypatch.setattr(settings, "LOG_FILE", str(log_file))
        configure_logging()
        try:
            assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)
            assert log_file.parent.is_dir()
        finally:
            for handler in root.handlers[:]:
                handler.close()
            root.handlers.clear()
