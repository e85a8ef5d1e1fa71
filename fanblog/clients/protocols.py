"""Interface shared by the cache backends."""

from collections.abc import AsyncGenerator, Awaitable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheClientProtocol(Protocol):
    """
    What :class:`~fanblog.managers.cache_manager.CacheManager` needs from a backend.

    ``RedisClient`` and ``MemoryClient`` both satisfy it.
    """

    def get(self, key: str) -> Awaitable[str | None]: ...

    def set(self, key: str, value: str, ex: int | None = None) -> Awaitable[bool]: ...

    def delete(self, *keys: str) -> Awaitable[int]: ...

    def exists(self, *keys: str) -> Awaitable[int]: ...

    def expire(self, key: str, seconds: int) -> Awaitable[bool]: ...

    def ttl(self, key: str) -> Awaitable[int]: ...

    def ping(self) -> Awaitable[bool]: ...

    def info(self) -> Awaitable[dict[str, Any]]: ...

    def flush_all(self) -> Awaitable[bool]: ...

    def scan_iter(self, pattern: str, count: int = 100) -> AsyncGenerator[str]: ...
