# tests/services/test_taxonomy.py
"""Tests for the category and tag services."""

from unittest.mock import AsyncMock

import pytest

from fanblog.errors import ConflictError, DuplicateRecordError, NotFoundError, ValidationError
from fanblog.events import BlogPostBeforeCreate, BlogPostBeforeUpdate
from fanblog.managers import CacheManager
from fanblog.schemas import Category, Tag
from fanblog.services import CategoryService, SettingService, TagService
from fanblog.utils.cache_keys import BlogCacheKey
from tests.fakes import FakeCategoryStore, FakeTagStore


class TestCategoryService:
    """Tests for CategoryService."""

    @pytest.mark.asyncio
    async def test_create(self, category_service: CategoryService) -> None:
        """Test a category gets a slug and shows up in the list."""
        created = await category_service.create("Web Development", "<b>All</b> things web")
        assert created.slug == "web-development"
        assert created.description == "All things web"
        assert [c.title for c in await category_service.get_all()] == ["Uncategorized", "Web Development"]

    @pytest.mark.asyncio
    async def test_commits_before_invalidating(
        self,
        category_service: CategoryService,
        category_store: FakeCategoryStore,
        cache_manager: CacheManager,
    ) -> None:
        """Test the category list is dropped only after the write is committed."""
        await category_service.get_all()

        async def list_still_cached() -> None:
            assert await cache_manager.exists(BlogCacheKey.ALL_CATS) == 1

        category_store.commit = AsyncMock(side_effect=list_still_cached)
        await category_service.create("Technology")
        category_store.commit.assert_awaited_once()
        assert await cache_manager.exists(BlogCacheKey.ALL_CATS) == 0

    @pytest.mark.asyncio
    async def test_duplicate_title_case_insensitive(self, category_service: CategoryService) -> None:
        """Test a title differing only in case is rejected."""
        await category_service.create("Technology")
        with pytest.raises(DuplicateRecordError, match="'technology' already exists."):
            await category_service.create("technology")

    @pytest.mark.asyncio
    async def test_empty_title(self, category_service: CategoryService) -> None:
        """Test a title that is empty once HTML is stripped is rejected."""
        with pytest.raises(ValidationError, match="Category title cannot be empty."):
            await category_service.create("<p> </p>")

    @pytest.mark.asyncio
    async def test_title_truncated(self, category_service: CategoryService) -> None:
        """Test titles are cut to the taxonomy limit."""
        created = await category_service.create("x" * 40)
        assert len(created.title) == 24
        assert len(created.slug) <= 24

    @pytest.mark.asyncio
    async def test_colliding_slug_suffixed(self, category_service: CategoryService) -> None:
        """Test distinct titles that slug alike get -2."""
        await category_service.create("C++")
        created = await category_service.create("C")
        assert created.slug == "c-2"

    @pytest.mark.asyncio
    async def test_get_all_cached(
        self,
        category_service: CategoryService,
        category_store: FakeCategoryStore,
    ) -> None:
        """Test the list is read from the store once and then from the cache."""
        await category_service.get_all()
        await category_service.get_all()
        assert category_store.list_calls == 1

    @pytest.mark.asyncio
    async def test_create_invalidates_list(
        self,
        category_service: CategoryService,
        cache_manager: CacheManager,
    ) -> None:
        """Test writes drop the cached category list and the post index."""
        await category_service.get_all()
        await cache_manager.set(BlogCacheKey.POSTS_INDEX, {"posts": []})
        await category_service.create("News")
        assert await cache_manager.exists(BlogCacheKey.ALL_CATS, BlogCacheKey.POSTS_INDEX) == 0

    @pytest.mark.asyncio
    async def test_get_and_get_by_slug(self, category_service: CategoryService) -> None:
        """Test lookups by id and by slug (case-insensitive)."""
        created = await category_service.create("News")
        assert (await category_service.get(created.id)).title == "News"
        assert (await category_service.get_by_slug("NEWS")).id == created.id

        with pytest.raises(NotFoundError, match="Category with id 99 is not found."):
            await category_service.get(99)
        with pytest.raises(NotFoundError, match="Category 'nope' does not exist."):
            await category_service.get_by_slug("nope")
        with pytest.raises(NotFoundError, match="Category does not exist."):
            await category_service.get_by_slug("")

    @pytest.mark.asyncio
    async def test_update_keeps_own_title(self, category_service: CategoryService) -> None:
        """Test updating a category to its own title is not a duplicate."""
        created = await category_service.create("News")
        updated = await category_service.update(created.model_copy(update={"description": "Daily"}))
        assert updated.title == "News"
        assert updated.slug == "news"
        assert updated.description == "Daily"

    @pytest.mark.asyncio
    async def test_update_to_taken_title(self, category_service: CategoryService) -> None:
        """Test renaming onto another category's title is rejected."""
        await category_service.create("News")
        sports = await category_service.create("Sports")
        with pytest.raises(DuplicateRecordError):
            await category_service.update(sports.model_copy(update={"title": "NEWS"}))

    @pytest.mark.asyncio
    async def test_update_invalid(self, category_service: CategoryService) -> None:
        """Test an unsaved category cannot be updated."""
        with pytest.raises(ValidationError, match="Invalid category to update."):
            await category_service.update(Category(title="News"))

    @pytest.mark.asyncio
    async def test_default_cannot_be_deleted(self, category_service: CategoryService) -> None:
        """Test deleting the default category is refused."""
        with pytest.raises(ConflictError, match="Default category cannot be deleted."):
            await category_service.delete(1)

    @pytest.mark.asyncio
    async def test_delete(self, category_service: CategoryService) -> None:
        """Test a deleted category disappears from the list."""
        news = await category_service.create("News")
        await category_service.delete(news.id)
        assert [c.title for c in await category_service.get_all()] == ["Uncategorized"]

    @pytest.mark.asyncio
    async def test_set_default(
        self,
        category_service: CategoryService,
        setting_service: SettingService,
    ) -> None:
        """Test the default category moves and the old one becomes deletable."""
        news = await category_service.create("News")
        await category_service.set_default(news.id)
        assert (await setting_service.get_blog_settings()).default_category_id == news.id

        await category_service.delete(1)
        with pytest.raises(ConflictError):
            await category_service.delete(news.id)

    @pytest.mark.asyncio
    async def test_before_create_creates_missing(self, category_service: CategoryService) -> None:
        """Test the handler creates a category only when the title is new."""
        await category_service.handle_before_create(BlogPostBeforeCreate(category_title="Travel"))
        await category_service.handle_before_create(BlogPostBeforeCreate(category_title="travel"))
        await category_service.handle_before_update(BlogPostBeforeUpdate(category_title=None))
        titles = [c.title for c in await category_service.get_all()]
        assert titles == ["Travel", "Uncategorized"]


class TestTagService:
    """Tests for TagService."""

    @pytest.mark.asyncio
    async def test_commits_before_invalidating(
        self,
        tag_service: TagService,
        tag_store: FakeTagStore,
        cache_manager: CacheManager,
    ) -> None:
        """Test the tag list is dropped only after the write is committed."""
        created = await tag_service.create(Tag(title="python"))
        await tag_service.get_all()

        async def list_still_cached() -> None:
            assert await cache_manager.exists(BlogCacheKey.ALL_TAGS) == 1

        tag_store.commit = AsyncMock(side_effect=list_still_cached)
        await tag_service.delete(created.id)
        tag_store.commit.assert_awaited_once()
        assert await cache_manager.exists(BlogCacheKey.ALL_TAGS) == 0

    @pytest.mark.asyncio
    async def test_create_and_lookup(self, tag_service: TagService) -> None:
        """Test a created tag is found by id, slug and title."""
        tag = await tag_service.create(Tag(title="Python"))
        assert tag.slug == "python"
        assert (await tag_service.get(tag.id)).title == "Python"
        assert (await tag_service.get_by_slug("python")).id == tag.id
        assert (await tag_service.get_by_title("PYTHON")).id == tag.id

    @pytest.mark.asyncio
    async def test_lookup_misses(self, tag_service: TagService) -> None:
        """Test missing tags raise NotFoundError with their message."""
        with pytest.raises(NotFoundError, match="Tag with title 'rust' does not exist."):
            await tag_service.get_by_title("rust")
        with pytest.raises(NotFoundError, match="Tag does not exist."):
            await tag_service.get_by_slug(None)

    @pytest.mark.asyncio
    async def test_invalid_create(self, tag_service: TagService) -> None:
        """Test a blank tag cannot be created."""
        with pytest.raises(ValidationError, match="Invalid tag to create."):
            await tag_service.create(Tag(title="   "))

    @pytest.mark.asyncio
    async def test_duplicate(self, tag_service: TagService) -> None:
        """Test a tag title differing only in case is rejected."""
        await tag_service.create(Tag(title="Python"))
        with pytest.raises(DuplicateRecordError):
            await tag_service.create(Tag(title="python"))

    @pytest.mark.asyncio
    async def test_update_and_delete(self, tag_service: TagService, tag_store: FakeTagStore) -> None:
        """Test renaming reslugs the tag and delete removes it."""
        tag = await tag_service.create(Tag(title="Py"))
        updated = await tag_service.update(tag.model_copy(update={"title": "Python 3"}))
        assert updated.slug == "python-3"

        await tag_service.delete(tag.id)
        assert tag_store.items == {}
        with pytest.raises(ValidationError, match="Invalid tag to update."):
            await tag_service.update(Tag(title="Ghost"))

    @pytest.mark.asyncio
    async def test_before_create_dedupes(self, tag_service: TagService, tag_store: FakeTagStore) -> None:
        """Test titles repeated in one post create a single tag."""
        await tag_service.handle_before_create(
            BlogPostBeforeCreate(tag_titles=("python", "Python", " ", "fastapi")),
        )
        assert sorted(t.title for t in tag_store.items.values()) == ["fastapi", "python"]

    @pytest.mark.asyncio
    async def test_before_update_skips_current(self, tag_service: TagService, tag_store: FakeTagStore) -> None:
        """Test titles already on the post are not created again."""
        await tag_service.create(Tag(title="python"))
        await tag_service.handle_before_update(
            BlogPostBeforeUpdate(tag_titles=("python", "asyncio"), current_tag_titles=("python",)),
        )
        assert sorted(t.title for t in tag_store.items.values()) == ["asyncio", "python"]
