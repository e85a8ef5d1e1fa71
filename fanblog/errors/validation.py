"""Handler for malformed request payloads."""

from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_CONTENT

from fanblog.errors.base import host
from fanblog.monitoring import get_logger

logger = get_logger(__name__)


def _format_error(error: dict) -> dict:
    formatted = {
        # Skip the "body"/"query"/"path" location prefix
        "field": ".".join(str(loc) for loc in error.get("loc", [])[1:]),
        "message": error.get("msg", "Invalid value"),
        "type": error.get("type", "validation_error"),
    }
    if "ctx" in error:
        formatted["context"] = {
            k: str(v) if isinstance(v, Exception) else v for k, v in error["ctx"].items()
        }
    return formatted


async def request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Answer FastAPI's request validation errors with one entry per field.

    Business rule violations raised by the services use
    :class:`fanblog.errors.ValidationError` and the blog handler instead.
    """
    errors = [_format_error(e) for e in cast(RequestValidationError, exc).errors()]
    logger.warning("Request validation failed", ip=host(request), endpoint=request.url.path, errors=errors)
    return ORJSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_CONTENT,
        content={"detail": "Validation failed", "errors": errors},
    )
