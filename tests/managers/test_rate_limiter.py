# tests/managers/test_rate_limiter.py
"""Tests for fanblog/managers/rate_limiter.py module."""

from unittest.mock import MagicMock, patch

import orjson
import pytest
from slowapi.errors import RateLimitExceeded

from fanblog.managers.rate_limiter import get_identifier, limiter, rate_limit_exceeded_handler


class TestGetIdentifier:
    """Tests for get_identifier function."""

    def test_api_key_header_ignored(self) -> None:
        """Test that an X-API-Key header does not change the rate limit key."""
        request = MagicMock()
        request.headers = {"X-API-Key": "test-api-key-123"}

        with patch(
            "fanblog.managers.rate_limiter.get_remote_address",
            return_value="192.168.1.100",
        ):
            assert get_identifier(request) == "ip:192.168.1.100"

    def test_returns_client_ip(self) -> None:
        """Test that the client IP address is the key."""
        request = MagicMock()

        with patch(
            "fanblog.managers.rate_limiter.get_remote_address",
            return_value="192.168.1.100",
        ):
            assert get_identifier(request) == "ip:192.168.1.100"


class TestLimiterInstance:
    def test_limiter_uses_identifier(self) -> None:
        """Test that the limiter keys requests by get_identifier."""
        assert limiter._key_func is get_identifier


class TestRateLimitExceededHandler:
    @pytest.mark.asyncio
    async def test_response_payload(self) -> None:
        """Test the 429 payload carries the limit and retry delay."""
        request = MagicMock()
        request.url.path = "/posts"
        request.app.state.limiter._inject_headers.side_effect = lambda response, _: response
        exc = RateLimitExceeded(MagicMock(error_message=None, limit="5 per 1 minute"))

        response = await rate_limit_exceeded_handler(request, exc)

        assert response.status_code == 429
        assert orjson.loads(response.body) == {
            "detail": "Rate limit exceeded",
            "allowed_requests": "5 per 1 minute",
            "retry_after": "60 seconds",
        }
