"""Tests for the cache manager and the blog cache built over it."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from pydantic import TypeAdapter

from fanblog.clients import MemoryClient
from fanblog.configs import CacheConfig
from fanblog.errors import CacheKeyError
from fanblog.managers import BlogCache, CacheManager
from fanblog.schemas import Category
from fanblog.utils.cache_keys import AGGREGATE_KEYS, BlogCacheKey
from fanblog.utils.cache_serializer import COMPRESSION_MARKER


class TestBasicOperations:
    @pytest.mark.asyncio
    async def test_set_and_get(self, cache_manager: CacheManager) -> None:
        """Test values round trip and are stored under the prefixed key."""
        await cache_manager.set("greeting", {"text": "hello"}, ttl=60)
        assert await cache_manager.get("greeting") == {"text": "hello"}
        assert await cache_manager.exists("greeting") == 1

    @pytest.mark.asyncio
    async def test_prefixed_key(self, cache_manager: CacheManager, memory_client: MemoryClient) -> None:
        """Test keys are written as prefix:key and prefix:namespace:key."""
        await cache_manager.set("a", 1)
        await cache_manager.set("b", 2, namespace="ns")
        assert await memory_client.get("fanblog:a") == "1"
        assert await memory_client.get("fanblog:ns:b") == "2"

    @pytest.mark.asyncio
    async def test_large_values_compressed(
        self,
        cache_manager: CacheManager,
        memory_client: MemoryClient,
    ) -> None:
        """Test payloads over the threshold are stored compressed and read back whole."""
        body = "lorem ipsum " * 500
        await cache_manager.set("post", {"body": body})
        raw = await memory_client.get("fanblog:post")
        assert raw is not None
        assert raw.startswith(COMPRESSION_MARKER)
        assert (await cache_manager.get("post"))["body"] == body

    @pytest.mark.asyncio
    async def test_ttl_capped(self, memory_client: MemoryClient) -> None:
        """Test a ttl above max_ttl is capped."""
        manager = CacheManager(CacheConfig(max_ttl=100), client=memory_client)
        await manager.set("k", 1, ttl=10_000)
        assert await manager.ttl("k") <= 100

    @pytest.mark.asyncio
    async def test_statistics(self, cache_manager: CacheManager) -> None:
        """Test hits, misses and sets are counted."""
        await cache_manager.get("missing")
        await cache_manager.set("k", 1)
        await cache_manager.get("k")
        stats = cache_manager.get_statistics()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["sets"] == 1

    @pytest.mark.asyncio
    async def test_clear(self, cache_manager: CacheManager, memory_client: MemoryClient) -> None:
        """Test clear removes only keys under the prefix."""
        await cache_manager.set("a", 1)
        await cache_manager.set("b", 2)
        await memory_client.set("foreign:c", "3")
        assert await cache_manager.clear() == 2
        assert await memory_client.get("foreign:c") == "3"

    @pytest.mark.asyncio
    async def test_backend_failure_raises_cache_key_error(self) -> None:
        """Test a failing backend surfaces as CacheKeyError."""
        client = AsyncMock(spec=MemoryClient)
        client.get.side_effect = ConnectionError("down")
        manager = CacheManager(client=client)
        with pytest.raises(CacheKeyError):
            await manager.get("k")
        assert manager.get_statistics()["errors"] == 1

    @pytest.mark.asyncio
    async def test_health_check(self, cache_manager: CacheManager) -> None:
        """Test health reports the in-memory backend as healthy."""
        health = await cache_manager.health_check()
        assert health["backend"] == "in-memory"
        assert health["status"] == "healthy"


class TestGetOrSet:
    @pytest.mark.asyncio
    async def test_miss_populates(self, cache_manager: CacheManager) -> None:
        """Test a miss runs the callback and stores its result."""
        callback = AsyncMock(return_value=[1, 2, 3])
        assert await cache_manager.get_or_set("nums", callback, 60) == [1, 2, 3]
        assert await cache_manager.get("nums") == [1, 2, 3]
        callback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_hit_skips_callback(self, cache_manager: CacheManager) -> None:
        """Test a hit returns the cached value without calling the callback."""
        await cache_manager.set("nums", [9])
        callback = AsyncMock(return_value=[1])
        assert await cache_manager.get_or_set("nums", callback, 60) == [9]
        callback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_none_not_cached(self, cache_manager: CacheManager) -> None:
        """Test a None result is returned but never stored."""
        callback = AsyncMock(return_value=None)
        assert await cache_manager.get_or_set("nothing", callback, 60) is None
        assert await cache_manager.exists("nothing") == 0

    @pytest.mark.asyncio
    async def test_adapter_rebuilds_models(self, cache_manager: CacheManager) -> None:
        """Test cached JSON is validated back into models on a hit."""
        adapter = TypeAdapter(list[Category])
        load = AsyncMock(return_value=[Category(id=1, title="News", slug="news")])
        await cache_manager.get_or_set("cats", load, 60, adapter=adapter)

        cached = await cache_manager.get_or_set("cats", load, 60, adapter=adapter)
        assert isinstance(cached[0], Category)
        assert cached[0].slug == "news"
        load.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stale_shape_refetched(self, cache_manager: CacheManager) -> None:
        """Test a cached value that no longer validates is replaced."""
        await cache_manager.set("cats", [{"unexpected": True}])
        load = AsyncMock(return_value=[Category(id=1, title="News", slug="news")])
        result = await cache_manager.get_or_set("cats", load, 60, adapter=TypeAdapter(list[Category]))
        assert result[0].title == "News"
        load.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_read_failure_falls_back_to_callback(self) -> None:
        """Test a failing cache read still answers from the callback."""
        client = AsyncMock(spec=MemoryClient)
        client.get.side_effect = ConnectionError("down")
        client.set.side_effect = ConnectionError("down")
        manager = CacheManager(client=client)

        result = await manager.get_or_set("k", AsyncMock(return_value={"ok": True}), 60)
        assert result == {"ok": True}

    @pytest.mark.asyncio
    async def test_concurrent_misses_coalesce(self, cache_manager: CacheManager) -> None:
        """Test concurrent misses on one key run the callback once."""
        calls = 0

        async def slow_load() -> int:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.05)
            return 42

        results = await asyncio.gather(
            *(cache_manager.get_or_set("answer", slow_load, 60) for _ in range(5)),
        )
        assert results == [42] * 5
        assert calls == 1


class TestBlogCache:
    @pytest.mark.asyncio
    async def test_invalidate_aggregates(self, cache_manager: CacheManager) -> None:
        """Test every aggregate key is removed and other keys are kept."""
        for key in AGGREGATE_KEYS:
            await cache_manager.set(key, 1)
        await cache_manager.set(BlogCacheKey.SETTINGS_BLOG, 1)

        await BlogCache(cache_manager).invalidate_aggregates()

        assert await cache_manager.exists(*AGGREGATE_KEYS) == 0
        assert await cache_manager.exists(BlogCacheKey.SETTINGS_BLOG) == 1

    @pytest.mark.asyncio
    async def test_remove_swallows_backend_failure(self) -> None:
        """Test a failing delete is logged rather than raised."""
        client = AsyncMock(spec=MemoryClient)
        client.delete.side_effect = ConnectionError("down")
        await BlogCache(CacheManager(client=client)).remove("k")
