"""Blog-specific view over the cache manager."""

from typing import TypeVar

from pydantic import TypeAdapter

from fanblog.errors import CacheKeyError
from fanblog.managers.cache_manager import CacheCallback, CacheManager
from fanblog.monitoring import get_logger
from fanblog.utils.cache_keys import AGGREGATE_KEYS

logger = get_logger(__name__)

T = TypeVar("T")


class BlogCache:
    """
    Cache-aside reads and invalidation for the blog services.

    Removal is best-effort: a failing backend is logged and the persisted
    write stands.
    """

    def __init__(self, cache: CacheManager) -> None:
        self.cache = cache

    async def get_or_set(
        self,
        key: str,
        callback: CacheCallback[T],
        ttl: int,
        *,
        adapter: TypeAdapter[T] | None = None,
    ) -> T:
        return await self.cache.get_or_set(key, callback, ttl, adapter=adapter)

    async def remove(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self.cache.delete(*keys)
        except CacheKeyError:
            logger.warning("Cache invalidation failed", keys=keys, exc_info=True)

    async def invalidate_aggregates(self) -> None:
        """Drop the post index, recent posts, taxonomy lists, archives and count."""
        await self.remove(*AGGREGATE_KEYS)
