"""Exceptions raised by the cache layer."""

from starlette import status

from fanblog.errors.base import BaseAppError, create_exception_handler
from fanblog.monitoring import get_logger

logger = get_logger(__name__)


class CacheExceptionError(BaseAppError):
    """Base exception for cache operations."""

    def __init__(self, detail: str = "Cache exception occurred") -> None:
        super().__init__(
            detail=detail,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class CacheKeyError(CacheExceptionError):
    """A get, set or delete against the backend failed."""

    def __init__(self, detail: str = "Cache key error") -> None:
        super().__init__(detail)


class CacheSerializationError(CacheExceptionError):
    """A value could not be encoded (or compressed) for storage."""

    def __init__(self, detail: str = "Cannot serialize value") -> None:
        super().__init__(detail)


class CacheDeserializationError(CacheExceptionError):
    """A stored payload could not be decoded (or decompressed)."""

    def __init__(self, detail: str = "Cannot deserialize value") -> None:
        super().__init__(detail)


cache_exception_handler = create_exception_handler(logger)
