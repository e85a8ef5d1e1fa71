"""Redis cache backend."""

from collections.abc import AsyncGenerator
from inspect import isawaitable
from typing import Any

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from fanblog.configs import pool_kwargs
from fanblog.errors import CacheKeyError
from fanblog.monitoring import get_logger

logger = get_logger(__name__)


class RedisClient:
    """Async Redis wrapper over a shared connection pool."""

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = config or pool_kwargs
        self._pool: ConnectionPool | None = None
        self._redis: Redis | None = None

    async def connect(self) -> None:
        """
        Open the pool and ping the server.

        Raises:
            CacheKeyError: When the server cannot be reached.
        """
        self._pool = ConnectionPool(**self.config)
        self._redis = Redis(connection_pool=self._pool)
        if not await self.ping():
            mssg = f"Cannot connect to Redis at {self.config.get('host')}:{self.config.get('port')}"
            raise CacheKeyError(mssg)
        logger.info("Redis connection successful", host=self.config.get("host"))

    async def disconnect(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("Redis connection closed")

    @property
    def client(self) -> Redis:
        if self._redis is None:
            mssg = "Redis client not initialized. Call connect() first."
            raise RuntimeError(mssg)
        return self._redis

    async def get(self, key: str) -> str | None:
        try:
            return await self.client.get(key)
        except RedisError as e:
            logger.exception("Redis get failed", key=key)
            raise CacheKeyError(f"Cache get failed for key {key}") from e

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        try:
            return bool(await self.client.set(key, value, ex=ex))
        except RedisError as e:
            logger.exception("Redis set failed", key=key)
            raise CacheKeyError(f"Cache set failed for key {key}") from e

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return await self.client.delete(*keys)
        except RedisError as e:
            logger.exception("Redis delete failed", keys=keys)
            raise CacheKeyError(f"Cache delete failed for keys {keys}") from e

    async def exists(self, *keys: str) -> int:
        try:
            return await self.client.exists(*keys)
        except RedisError as e:
            raise CacheKeyError(f"Cache exists failed for keys {keys}") from e

    async def expire(self, key: str, seconds: int) -> bool:
        try:
            return bool(await self.client.expire(key, seconds))
        except RedisError as e:
            raise CacheKeyError(f"Cache expire failed for key {key}") from e

    async def ttl(self, key: str) -> int:
        try:
            return await self.client.ttl(key)
        except RedisError as e:
            raise CacheKeyError(f"Cache ttl failed for key {key}") from e

    async def flush_all(self) -> bool:
        """Flush the selected database only."""
        try:
            return bool(await self.client.flushdb())
        except RedisError as e:
            logger.exception("Redis flush failed")
            raise CacheKeyError("Cache flush failed") from e

    async def ping(self) -> bool:
        try:
            result = self.client.ping()
            if isawaitable(result):
                result = await result
        except RedisError:
            logger.warning("Redis ping failed", exc_info=True)
            return False
        return bool(result)

    async def info(self) -> dict[str, Any]:
        try:
            info = await self.client.info()
        except RedisError as e:
            raise CacheKeyError("Cache info failed") from e
        return info if isinstance(info, dict) else {}

    async def scan_iter(self, pattern: str, count: int = 100) -> AsyncGenerator[str]:
        """Yield keys matching ``pattern`` using SCAN cursors."""
        cursor = 0
        while True:
            try:
                cursor, keys = await self.client.scan(cursor, match=pattern, count=count)
            except RedisError as e:
                raise CacheKeyError(f"Cache scan failed for pattern {pattern}") from e
            for key in keys:
                yield key.decode("utf-8") if isinstance(key, bytes) else key
            if cursor == 0:
                break
