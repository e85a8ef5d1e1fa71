# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest

from fanblog.clients import MemoryClient
from fanblog.events import EventBus
from fanblog.managers import BlogCache, CacheManager
from fanblog.schemas import Category
from fanblog.services import (
    BlogPostService,
    CategoryService,
    PageService,
    SettingService,
    TagService,
    register_blog_handlers,
)
from tests.fakes import (
    FakeCategoryStore,
    FakeMetaStore,
    FakePostStore,
    FakeTagStore,
)


@pytest.fixture
def memory_client() -> MemoryClient:
    """In-memory cache client without the expiration sweep."""
    return MemoryClient()


@pytest.fixture
async def cache_manager(memory_client: MemoryClient) -> AsyncGenerator[CacheManager]:
    """Cache manager bound to the in-memory client, statistics reset."""
    manager = CacheManager(client=memory_client)
    manager.reset_statistics()
    yield manager
    await memory_client.close()


@pytest.fixture
def blog_cache(cache_manager: CacheManager) -> BlogCache:
    return BlogCache(cache_manager)


@pytest.fixture
def category_store() -> FakeCategoryStore:
    """Category store seeded with the default category, as the initial migration does."""
    store = FakeCategoryStore()
    store.items[1] = Category(id=1, title="Uncategorized", slug="uncategorized")
    store.next_id = 2
    return store


@pytest.fixture
def tag_store() -> FakeTagStore:
    return FakeTagStore()


@pytest.fixture
def post_store(category_store: FakeCategoryStore, tag_store: FakeTagStore) -> FakePostStore:
    return FakePostStore(category_store, tag_store)


@pytest.fixture
def meta_store() -> FakeMetaStore:
    return FakeMetaStore()


@pytest.fixture
def setting_service(meta_store: FakeMetaStore, blog_cache: BlogCache) -> SettingService:
    return SettingService(meta_store, blog_cache)


@pytest.fixture
def category_service(
    category_store: FakeCategoryStore,
    setting_service: SettingService,
    blog_cache: BlogCache,
) -> CategoryService:
    return CategoryService(category_store, setting_service, blog_cache)


@pytest.fixture
def tag_service(tag_store: FakeTagStore, blog_cache: BlogCache) -> TagService:
    return TagService(tag_store, blog_cache)


@pytest.fixture
def blog_post_service(
    post_store: FakePostStore,
    setting_service: SettingService,
    blog_cache: BlogCache,
    category_service: CategoryService,
    tag_service: TagService,
) -> BlogPostService:
    """Blog post service wired to the taxonomy handlers over the fake stores."""
    bus = register_blog_handlers(EventBus(), category_service, tag_service)
    return BlogPostService(post_store, setting_service, blog_cache, bus)


@pytest.fixture
def page_service(post_store: FakePostStore, blog_cache: BlogCache) -> PageService:
    return PageService(post_store, blog_cache)
