"""Cache manager: one entry point over the Redis or in-memory backend."""

from asyncio import Lock as AsyncLock
from collections import OrderedDict
from collections.abc import Callable, Coroutine
from threading import Lock as ThreadLock
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from fanblog.clients import CacheClientProtocol, MemoryClient, RedisClient
from fanblog.configs import CacheConfig, settings
from fanblog.errors import BASE_EXCEPTION, CacheExceptionError, CacheKeyError
from fanblog.managers.statistics import CacheStatistics
from fanblog.monitoring import get_logger
from fanblog.utils.cache_serializer import (
    compress,
    decompress,
    deserialize,
    do_compress,
    serialize,
)

logger = get_logger(__name__)

T = TypeVar("T")

CacheCallback = Callable[[], Coroutine[Any, Any, T]]


class CacheManager:
    """
    Cache-aside store for the blog read paths.

    Features:
        - Redis when enabled and reachable, otherwise the in-memory client
        - gzip compression of large values
        - Per-key locks so concurrent misses in one process populate once
        - Hit/miss statistics

    The cache is never the source of truth: a failing read in
    :meth:`get_or_set` falls through to the callback, and a failing write is
    logged and skipped.
    """

    # Upper bound on retained per-key locks (LRU eviction)
    MAX_LOCKS: int = 10_000

    def __init__(
        self,
        config: CacheConfig | None = None,
        client: CacheClientProtocol | None = None,
    ) -> None:
        self.cache_config = config or CacheConfig()
        self.redis_client = RedisClient()
        self.memory_client = MemoryClient()
        self._client: CacheClientProtocol = client or self.memory_client
        self.is_redis_available = isinstance(client, RedisClient)
        self.statistics = CacheStatistics()
        self._locks: OrderedDict[str, AsyncLock] = OrderedDict()
        self._locks_lock = ThreadLock()

    @property
    def backend(self) -> str:
        return "redis" if self.is_redis_available else "in-memory"

    async def initialize(self) -> None:
        """Connect to Redis when enabled, falling back to the in-memory client."""
        if settings.REDIS_ENABLED:
            try:
                await self.redis_client.connect()
            except CacheKeyError as e:
                logger.warning("Redis unavailable, using in-memory cache", error=str(e))
            else:
                self._client = self.redis_client
                self.is_redis_available = True
                logger.info("Cache manager initialized", backend=self.backend)
                return

        self._client = self.memory_client
        self.is_redis_available = False
        await self.memory_client.start_lifecycle()
        logger.info("Cache manager initialized", backend=self.backend)

    async def shutdown(self) -> None:
        if self.is_redis_available:
            await self.redis_client.disconnect()
        await self.memory_client.close()
        logger.info("Cache manager shut down")

    def _build_key(self, key: str, namespace: str | None = None) -> str:
        prefix = self.cache_config.key_prefix
        return f"{prefix}:{namespace}:{key}" if namespace else f"{prefix}:{key}"

    async def get(self, key: str, namespace: str | None = None) -> Any | None:
        """
        Return the decoded value stored under ``key`` or None on a miss.

        Raises:
            CacheKeyError: If the backend or decoding fails.
        """
        full_key = self._build_key(key, namespace)
        try:
            raw = await self._client.get(full_key)
            if raw is None:
                self.statistics.record_miss()
                return None
            value = deserialize(decompress(raw))
        except BASE_EXCEPTION + (CacheExceptionError,) as e:
            self.statistics.record_error()
            raise CacheKeyError(f"Cache get failed for key {key}") from e

        self.statistics.record_hit()
        logger.debug("Cache hit", key=full_key)
        return value

    async def set(
        self,
        key: str,
        value: object,
        ttl: int | None = None,
        namespace: str | None = None,
    ) -> bool:
        """
        Store ``value`` under ``key`` for ``ttl`` seconds (capped at ``max_ttl``).

        Raises:
            CacheKeyError: If serialization or the backend fails.
        """
        full_key = self._build_key(key, namespace)
        try:
            payload = serialize(value)
            if self.cache_config.compression_enabled and do_compress(
                payload,
                self.cache_config.compression_threshold,
            ):
                payload = compress(payload)

            ex = ttl if ttl is not None else self.cache_config.default_ttl
            stored = await self._client.set(full_key, payload, ex=min(ex, self.cache_config.max_ttl))
        except BASE_EXCEPTION + (CacheExceptionError,) as e:
            self.statistics.record_error()
            raise CacheKeyError(f"Cache set failed for key {key}") from e

        self.statistics.record_set()
        return stored

    async def delete(self, *keys: str, namespace: str | None = None) -> int:
        """Remove ``keys``; returns how many existed."""
        full_keys = [self._build_key(key, namespace) for key in keys]
        try:
            deleted = await self._client.delete(*full_keys)
        except BASE_EXCEPTION + (CacheExceptionError,) as e:
            self.statistics.record_error()
            raise CacheKeyError("Cache delete failed") from e
        if deleted:
            self.statistics.record_delete(deleted)
        return deleted

    async def exists(self, *keys: str, namespace: str | None = None) -> int:
        full_keys = [self._build_key(key, namespace) for key in keys]
        try:
            return await self._client.exists(*full_keys)
        except BASE_EXCEPTION + (CacheExceptionError,) as e:
            self.statistics.record_error()
            raise CacheKeyError("Cache exists check failed") from e

    async def ttl(self, key: str, namespace: str | None = None) -> int:
        try:
            return await self._client.ttl(self._build_key(key, namespace))
        except BASE_EXCEPTION + (CacheExceptionError,) as e:
            raise CacheKeyError(f"Cache ttl check failed for key {key}") from e

    def _get_or_create_lock(self, key: str) -> AsyncLock:
        with self._locks_lock:
            if key in self._locks:
                self._locks.move_to_end(key)
                return self._locks[key]
            while len(self._locks) >= self.MAX_LOCKS:
                self._locks.popitem(last=False)
            lock = self._locks[key] = AsyncLock()
            return lock

    async def _read(self, key: str, namespace: str | None, adapter: TypeAdapter[T] | None) -> T | None:
        try:
            cached = await self.get(key, namespace)
        except CacheKeyError:
            logger.warning("Cache read failed, querying store", key=key, exc_info=True)
            return None
        if cached is None or adapter is None:
            return cached
        try:
            return adapter.validate_python(cached)
        except PydanticValidationError:
            logger.warning("Discarding cached value with stale shape", key=key)
            return None

    async def get_or_set(
        self,
        key: str,
        callback: CacheCallback[T],
        ttl: int | None = None,
        namespace: str | None = None,
        *,
        adapter: TypeAdapter[T] | None = None,
    ) -> T:
        """
        Return the cached value for ``key`` or populate it from ``callback``.

        Args:
            key: Cache key.
            callback: Coroutine function producing the value on a miss.
            ttl: Expiration in seconds.
            namespace: Optional key namespace.
            adapter: Rebuilds typed values (e.g. pydantic models) from the
                decoded JSON on a hit.

        Returns:
            The cached or freshly computed value.
        """
        cached = await self._read(key, namespace, adapter)
        if cached is not None:
            return cached

        async with self._get_or_create_lock(self._build_key(key, namespace)):
            # Another task may have filled the entry while we waited
            cached = await self._read(key, namespace, adapter)
            if cached is not None:
                return cached

            value = await callback()
            if value is not None:
                try:
                    await self.set(key, value, ttl, namespace)
                except CacheKeyError:
                    logger.warning("Cache population failed", key=key, exc_info=True)
            return value

    async def clear(self, namespace: str | None = None) -> int:
        """Delete every key under the prefix (and namespace)."""
        prefix = self.cache_config.key_prefix
        pattern = f"{prefix}:{namespace}:*" if namespace else f"{prefix}:*"
        keys = [key async for key in self._client.scan_iter(pattern)]
        deleted = await self._client.delete(*keys) if keys else 0
        logger.info("Cache cleared", pattern=pattern, deleted=deleted)
        return deleted

    async def ping(self) -> bool:
        try:
            return await self._client.ping()
        except BASE_EXCEPTION + (CacheExceptionError,):
            logger.exception("Cache ping failed")
            return False

    async def health_check(self) -> dict[str, Any]:
        healthy = await self.ping()
        return {
            "backend": self.backend,
            "status": "healthy" if healthy else "unhealthy",
            "statistics": self.get_statistics(),
        }

    def get_statistics(self) -> dict[str, int | str]:
        return self.statistics.to_dict()

    def reset_statistics(self) -> None:
        self.statistics.reset()
