"""
Category and tag services.

Both keep the full list cached and check titles against it case-insensitively.
They also answer the blog post "before create/update" events by creating any
category or tag the post names that does not exist yet.
"""

from pydantic import TypeAdapter

from fanblog.configs.settings import TAXONOMY_SLUG_MAX_LENGTH, TAXONOMY_TITLE_MAX_LENGTH
from fanblog.errors import ConflictError, DuplicateRecordError, NotFoundError, ValidationError
from fanblog.events import BlogPostBeforeCreate, BlogPostBeforeUpdate
from fanblog.managers import BlogCache
from fanblog.monitoring import get_logger
from fanblog.repositories import CategoryStore, TagStore
from fanblog.schemas import Category, Tag
from fanblog.services.settings import SettingService
from fanblog.utils.cache_keys import BlogCacheKey, BlogCacheTTL
from fanblog.utils.slugs import slugify_taxonomy
from fanblog.utils.text import clean_html

logger = get_logger(__name__)

_CATEGORIES = TypeAdapter(list[Category])
_TAGS = TypeAdapter(list[Tag])


def prepare_title(title: str | None) -> str:
    """Strip HTML and cut to the taxonomy title limit."""
    return clean_html(title)[:TAXONOMY_TITLE_MAX_LENGTH]


def _same_title(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


class CategoryService:
    def __init__(
        self,
        categories: CategoryStore,
        settings: SettingService,
        cache: BlogCache,
    ) -> None:
        self.categories = categories
        self.settings = settings
        self.cache = cache

    async def get_all(self) -> list[Category]:
        return await self.cache.get_or_set(
            BlogCacheKey.ALL_CATS,
            self.categories.get_list,
            BlogCacheTTL.ALL_CATS,
            adapter=_CATEGORIES,
        )

    async def get(self, category_id: int) -> Category:
        for category in await self.get_all():
            if category.id == category_id:
                return category
        raise NotFoundError(f"Category with id {category_id} is not found.")

    async def get_by_slug(self, slug: str | None) -> Category:
        if not slug:
            raise NotFoundError("Category does not exist.")
        for category in await self.get_all():
            if _same_title(category.slug, slug):
                return category
        raise NotFoundError(f"Category '{slug}' does not exist.")

    async def set_default(self, category_id: int) -> None:
        await self.get(category_id)
        await self.settings.upsert_blog_settings(default_category_id=category_id)

    async def _invalidate(self) -> None:
        await self.cache.remove(BlogCacheKey.ALL_CATS, BlogCacheKey.POSTS_INDEX)

    async def create(self, title: str | None, description: str | None = None) -> Category:
        """
        Create a category.

        Raises:
            ValidationError: If the title is empty.
            DuplicateRecordError: If a category with the same title exists.
        """
        title = prepare_title(title)
        if not title:
            raise ValidationError("Category title cannot be empty.")

        all_cats = await self.get_all()
        if any(_same_title(c.title, title) for c in all_cats):
            raise DuplicateRecordError(f"'{title}' already exists.")

        category = await self.categories.create(
            Category(
                title=title,
                slug=slugify_taxonomy(title, TAXONOMY_SLUG_MAX_LENGTH, (c.slug for c in all_cats)),
                description=clean_html(description) or None,
            ),
        )
        await self.categories.commit()
        await self._invalidate()
        logger.debug("Created category", id=category.id, slug=category.slug)
        return category

    async def update(self, category: Category) -> Category:
        title = prepare_title(category.title)
        if category.id <= 0 or not title:
            raise ValidationError("Invalid category to update.")

        others = [c for c in await self.get_all() if c.id != category.id]
        if any(_same_title(c.title, title) for c in others):
            raise DuplicateRecordError(f"'{title}' already exists.")

        await self.get(category.id)
        updated = await self.categories.update(
            category.model_copy(
                update={
                    "title": title,
                    "slug": slugify_taxonomy(title, TAXONOMY_SLUG_MAX_LENGTH, (c.slug for c in others)),
                    "description": clean_html(category.description) or None,
                },
            ),
        )
        await self.categories.commit()
        await self._invalidate()
        logger.debug("Updated category", id=updated.id, slug=updated.slug)
        return updated

    async def delete(self, category_id: int) -> None:
        """
        Delete a category and move its posts to the default category.

        Raises:
            ConflictError: If ``category_id`` is the default category.
        """
        blog_settings = await self.settings.get_blog_settings()
        if category_id == blog_settings.default_category_id:
            raise ConflictError("Default category cannot be deleted.")

        await self.get(category_id)
        await self.categories.delete(category_id, blog_settings.default_category_id)
        await self.categories.commit()
        await self._invalidate()
        logger.debug("Deleted category", id=category_id)

    async def _ensure_exists(self, title: str | None) -> None:
        if not title or not title.strip():
            return
        if not any(_same_title(c.title, title) for c in await self.get_all()):
            await self.create(title)

    async def handle_before_create(self, event: BlogPostBeforeCreate) -> None:
        await self._ensure_exists(event.category_title)

    async def handle_before_update(self, event: BlogPostBeforeUpdate) -> None:
        await self._ensure_exists(event.category_title)


class TagService:
    def __init__(self, tags: TagStore, cache: BlogCache) -> None:
        self.tags = tags
        self.cache = cache

    async def get_all(self) -> list[Tag]:
        return await self.cache.get_or_set(
            BlogCacheKey.ALL_TAGS,
            self.tags.get_list,
            BlogCacheTTL.ALL_TAGS,
            adapter=_TAGS,
        )

    async def get(self, tag_id: int) -> Tag:
        for tag in await self.get_all():
            if tag.id == tag_id:
                return tag
        raise NotFoundError(f"Tag with id {tag_id} is not found.")

    async def get_by_slug(self, slug: str | None) -> Tag:
        if not slug:
            raise NotFoundError("Tag does not exist.")
        for tag in await self.get_all():
            if _same_title(tag.slug, slug):
                return tag
        raise NotFoundError(f"Tag '{slug}' does not exist.")

    async def get_by_title(self, title: str | None) -> Tag:
        if not title:
            raise NotFoundError("Tag does not exist.")
        for tag in await self.get_all():
            if _same_title(tag.title, title):
                return tag
        raise NotFoundError(f"Tag with title '{title}' does not exist.")

    async def _invalidate(self) -> None:
        await self.cache.remove(BlogCacheKey.ALL_TAGS, BlogCacheKey.POSTS_INDEX)

    async def create(self, tag: Tag) -> Tag:
        title = prepare_title(tag.title)
        if not title:
            raise ValidationError("Invalid tag to create.")

        all_tags = await self.get_all()
        if any(_same_title(t.title, title) for t in all_tags):
            raise DuplicateRecordError(f"'{title}' already exists.")

        created = await self.tags.create(
            tag.model_copy(
                update={
                    "id": 0,
                    "title": title,
                    "slug": slugify_taxonomy(title, TAXONOMY_SLUG_MAX_LENGTH, (t.slug for t in all_tags)),
                    "description": clean_html(tag.description) or None,
                },
            ),
        )
        await self.tags.commit()
        await self._invalidate()
        logger.debug("Created tag", id=created.id, slug=created.slug)
        return created

    async def update(self, tag: Tag) -> Tag:
        title = prepare_title(tag.title)
        if tag.id <= 0 or not title:
            raise ValidationError("Invalid tag to update.")

        others = [t for t in await self.get_all() if t.id != tag.id]
        if any(_same_title(t.title, title) for t in others):
            raise DuplicateRecordError(f"'{title}' already exists.")

        await self.get(tag.id)
        updated = await self.tags.update(
            tag.model_copy(
                update={
                    "title": title,
                    "slug": slugify_taxonomy(title, TAXONOMY_SLUG_MAX_LENGTH, (t.slug for t in others)),
                    "description": clean_html(tag.description) or None,
                },
            ),
        )
        await self.tags.commit()
        await self._invalidate()
        logger.debug("Updated tag", id=updated.id, slug=updated.slug)
        return updated

    async def delete(self, tag_id: int) -> None:
        await self.get(tag_id)
        await self.tags.delete(tag_id)
        await self.tags.commit()
        await self._invalidate()

    async def _create_missing(self, titles: list[str]) -> None:
        existing = {t.title.casefold() for t in await self.get_all()}
        for title in titles:
            key = title.casefold()
            if key in existing:
                continue
            await self.create(Tag(title=title))
            existing.add(key)

    async def handle_before_create(self, event: BlogPostBeforeCreate) -> None:
        await self._create_missing([t for t in event.tag_titles if t and t.strip()])

    async def handle_before_update(self, event: BlogPostBeforeUpdate) -> None:
        """Create tags for titles the post does not already carry."""
        current = set(event.current_tag_titles)
        await self._create_missing(
            [t for t in event.tag_titles if t and t.strip() and t not in current],
        )
