"""Rate limiter configuration using slowapi."""

from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from fanblog.configs import LimiterConfig
from fanblog.monitoring import get_logger

logger = get_logger(__name__)


def get_identifier(request: Request) -> str:
    """Key rate limits by client IP address; request headers are never trusted for this."""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Answer a rate limited request with the limit and the retry delay."""
    http_exc = cast(RateLimitExceeded, exc)
    response = _rate_limit_exceeded_handler(request, http_exc)
    logger.warning("Rate limit exceeded", endpoint=request.url.path, limit=http_exc.detail)
    return ORJSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content={
            "detail": "Rate limit exceeded",
            "allowed_requests": http_exc.detail,
            "retry_after": f"{response.headers.get('retry-after', '60')} seconds",
        },
    )
