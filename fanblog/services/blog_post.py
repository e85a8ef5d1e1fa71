"""
Blog post service.

Writes go validate, convert, persist, commit, invalidate and notify in that order;
reads go through the blog cache where the result is shared by every visitor.
"""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta

from pydantic import TypeAdapter

from fanblog.configs.settings import (
    DEFAULT_PAGE_INDEX,
    DEFAULT_PAGE_SIZE,
    POST_CACHE_WINDOW_DAYS,
    POST_TITLE_MAX_LENGTH,
)
from fanblog.errors import NotFoundError, ValidationError
from fanblog.events import (
    BlogPostBeforeCreate,
    BlogPostBeforeUpdate,
    BlogPostCreated,
    BlogPostUpdated,
    EventBus,
)
from fanblog.managers import BlogCache
from fanblog.monitoring import get_logger
from fanblog.repositories import PostStore
from fanblog.schemas import (
    ArchiveItem,
    BlogPost,
    BlogPostList,
    Post,
    PostListQuery,
    PostListQueryType,
    PostStatus,
    PostType,
)
from fanblog.services.image import ImageService
from fanblog.services.settings import SettingService
from fanblog.services.taxonomy import prepare_title
from fanblog.utils.cache_keys import BlogCacheKey, BlogCacheTTL, post_key
from fanblog.utils.slugs import next_unique_slug, slugify
from fanblog.utils.text import get_excerpt, html_decode

logger = get_logger(__name__)

TITLE_REQUIRED_MSG = "'Title' must not be empty."
TITLE_TOO_LONG_MSG = (
    "The length of 'Title' must be {max_length} characters or fewer. You entered {length} characters."
)

_POST = TypeAdapter(Post)
_POST_LIST = TypeAdapter(BlogPostList)
_ARCHIVES = TypeAdapter(list[ArchiveItem])
_COUNT = TypeAdapter(int)


def validate_post_title(title: str | None, status: PostStatus) -> None:
    """
    Check a post title against the publishing rules.

    A draft may be untitled, a published post may not; neither may exceed
    the title limit.

    Raises:
        ValidationError: With every broken rule listed in ``errors``.
    """
    errors = []
    if status == PostStatus.PUBLISHED and not (title and title.strip()):
        errors.append(TITLE_REQUIRED_MSG)
    if title and len(title) > POST_TITLE_MAX_LENGTH:
        errors.append(TITLE_TOO_LONG_MSG.format(max_length=POST_TITLE_MAX_LENGTH, length=len(title)))
    if errors:
        raise ValidationError(errors[0], errors=errors)


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


def normalize_taxonomy(
    category_title: str | None,
    tag_titles: Iterable[str],
) -> tuple[str | None, tuple[str, ...]]:
    """
    Clean and cut category and tag titles the way the taxonomy services store them.

    Tags that end up empty are dropped, as are case-insensitive repeats.
    """
    category = prepare_title(category_title) or None
    tags: dict[str, str] = {}
    for title in tag_titles:
        prepared = prepare_title(title)
        if prepared:
            tags.setdefault(prepared.casefold(), prepared)
    return category, tuple(tags.values())


class BlogPostService:
    def __init__(
        self,
        posts: PostStore,
        settings_service: SettingService,
        cache: BlogCache,
        bus: EventBus,
        images: ImageService | None = None,
    ) -> None:
        self.posts = posts
        self.settings = settings_service
        self.cache = cache
        self.bus = bus
        self.images = images

    # --- writes ---

    async def create(self, blog_post: BlogPost) -> BlogPost:
        """
        Store a new post.

        Missing categories and tags named by the post are created by the
        ``BlogPostBeforeCreate`` handlers before the post is persisted.
        """
        validate_post_title(blog_post.title, blog_post.status)
        category_title, tag_titles = normalize_taxonomy(blog_post.category_title, blog_post.tag_titles)
        post = await self._to_post(blog_post, category_title=category_title)

        await self.bus.publish(
            BlogPostBeforeCreate(category_title=category_title, tag_titles=tag_titles),
        )
        created = await self.posts.create(post, category_title, tag_titles)
        await self.posts.commit()

        # Drafts appear in no cached list
        if created.status == PostStatus.PUBLISHED:
            await self.cache.invalidate_aggregates()

        result = self._to_blog_post(created)
        await self.bus.publish(BlogPostCreated(blog_post=result))
        logger.info("Blog post created", id=created.id, slug=created.slug, status=created.status)
        return await self.get(created.id)

    async def update(self, blog_post: BlogPost) -> BlogPost:
        if blog_post.id <= 0:
            raise ValidationError("Invalid blog post to update.")
        validate_post_title(blog_post.title, blog_post.status)

        existing = await self.posts.get(blog_post.id, PostType.BLOG_POST)
        if existing is None:
            raise NotFoundError(f"Blog post with id {blog_post.id} is not found.")
        category_title, tag_titles = normalize_taxonomy(blog_post.category_title, blog_post.tag_titles)
        post = await self._to_post(blog_post, existing, category_title=category_title)

        await self.bus.publish(
            BlogPostBeforeUpdate(
                category_title=category_title,
                tag_titles=tag_titles,
                current_tag_titles=tuple(t.title for t in existing.tags),
            ),
        )
        updated = await self.posts.update(post, category_title, tag_titles)
        await self.posts.commit()

        await self.cache.invalidate_aggregates()
        await self.cache.remove(self._post_key(existing), self._post_key(updated))

        result = self._to_blog_post(updated)
        await self.bus.publish(BlogPostUpdated(blog_post=result))
        logger.info("Blog post updated", id=updated.id, slug=updated.slug, status=updated.status)
        return result

    async def delete(self, post_id: int) -> None:
        post = await self.posts.get(post_id, PostType.BLOG_POST)
        if post is None:
            raise NotFoundError(f"Blog post with id {post_id} is not found.")

        await self.posts.delete(post_id)
        await self.posts.commit()
        await self.cache.invalidate_aggregates()
        await self.cache.remove(self._post_key(post))
        logger.info("Blog post deleted", id=post_id, slug=post.slug)

    async def remove_blog_cache(self) -> None:
        await self.cache.invalidate_aggregates()

    # --- reads ---

    async def get(self, post_id: int) -> BlogPost:
        post = await self.posts.get(post_id, PostType.BLOG_POST)
        if post is None:
            raise NotFoundError(f"Blog post with id {post_id} is not found.")
        return self._to_blog_post(post)

    async def get_by_slug(self, slug: str, year: int, month: int, day: int) -> BlogPost:
        """
        Published or draft post by its permalink parts.

        Posts from the last 100 days are cached with their body already
        rendered; older ones are read from the store every time.
        """

        async def load() -> Post | None:
            post = await self.posts.get_by_slug(slug, year, month, day)
            if post is not None and self.images is not None:
                post.body = await self.images.process_responsive_images(post.body)
            return post

        try:
            posted_on = date(year, month, day)
        except ValueError as e:
            raise NotFoundError(f"Blog post '{slug}' is not found.") from e

        if datetime.now(UTC).date() - posted_on <= timedelta(days=POST_CACHE_WINDOW_DAYS):
            post = await self.cache.get_or_set(
                post_key(slug, year, month, day),
                load,
                BlogCacheTTL.SINGLE_POST,
                adapter=_POST,
            )
        else:
            post = await load()

        if post is None:
            raise NotFoundError(f"Blog post '{slug}' is not found.")
        return self._to_blog_post(post)

    async def _query(self, query: PostListQuery) -> BlogPostList:
        posts, total = await self.posts.get_list(query)
        return BlogPostList(posts=[self._to_blog_post(p) for p in posts], total_post_count=total)

    async def get_list(
        self,
        page_index: int = DEFAULT_PAGE_INDEX,
        page_size: int = DEFAULT_PAGE_SIZE,
        cacheable: bool = True,
    ) -> BlogPostList:
        """Published posts, newest first; the first page is cached as the index."""
        page_index = max(page_index, 1)
        query = PostListQuery(PostListQueryType.BLOG_POSTS, page_index, page_size)

        if page_index == 1 and cacheable:
            return await self.cache.get_or_set(
                BlogCacheKey.POSTS_INDEX,
                lambda: self._query(query),
                BlogCacheTTL.POSTS_INDEX,
                adapter=_POST_LIST,
            )
        return await self._query(query)

    async def get_list_for_category(self, slug: str | None, page_index: int = DEFAULT_PAGE_INDEX) -> BlogPostList:
        if not slug:
            raise NotFoundError("Category does not exist.")
        blog_settings = await self.settings.get_blog_settings()
        return await self._query(
            PostListQuery(
                PostListQueryType.BLOG_POSTS_BY_CATEGORY,
                max(page_index, 1),
                blog_settings.post_per_page,
                category_slug=slug,
            ),
        )

    async def get_list_for_tag(self, slug: str | None, page_index: int = DEFAULT_PAGE_INDEX) -> BlogPostList:
        if not slug:
            raise NotFoundError("Tag does not exist.")
        blog_settings = await self.settings.get_blog_settings()
        return await self._query(
            PostListQuery(
                PostListQueryType.BLOG_POSTS_BY_TAG,
                max(page_index, 1),
                blog_settings.post_per_page,
                tag_slug=slug,
            ),
        )

    async def get_list_for_archive(self, year: int | None, month: int | None = None) -> BlogPostList:
        if year is None:
            raise ValidationError("Year must be provided.")
        return await self._query(
            PostListQuery(PostListQueryType.BLOG_POSTS_ARCHIVE, year=year, month=month),
        )

    async def get_list_for_drafts(self) -> BlogPostList:
        return await self._query(PostListQuery(PostListQueryType.BLOG_DRAFTS))

    async def get_recent_posts(self, number_of_posts: int) -> BlogPostList:
        """Latest posts of any status, for the admin dashboard."""
        return await self._query(
            PostListQuery(PostListQueryType.BLOG_POSTS_BY_NUMBER, page_size=max(number_of_posts, 1)),
        )

    async def get_recent_published_posts(self, number_of_posts: int) -> BlogPostList:
        query = PostListQuery(
            PostListQueryType.BLOG_PUBLISHED_POSTS_BY_NUMBER,
            page_size=max(number_of_posts, 1),
        )
        return await self.cache.get_or_set(
            BlogCacheKey.POSTS_RECENT,
            lambda: self._query(query),
            BlogCacheTTL.POSTS_RECENT,
            adapter=_POST_LIST,
        )

    async def get_archives(self) -> list[ArchiveItem]:
        return await self.cache.get_or_set(
            BlogCacheKey.ALL_ARCHIVES,
            self.posts.get_archives,
            BlogCacheTTL.ALL_ARCHIVES,
            adapter=_ARCHIVES,
        )

    async def get_post_count(self) -> int:
        async def count() -> int:
            return await self.posts.count(PostType.BLOG_POST, PostStatus.PUBLISHED)

        return await self.cache.get_or_set(
            BlogCacheKey.POST_COUNT,
            count,
            BlogCacheTTL.POST_COUNT,
            adapter=_COUNT,
        )

    # --- conversion ---

    @staticmethod
    def _post_key(post: Post) -> str:
        created = _as_utc(post.created_on)
        return post_key(post.slug, created.year, created.month, created.day)

    async def _to_post(
        self,
        blog_post: BlogPost,
        existing: Post | None = None,
        *,
        category_title: str | None = None,
    ) -> Post:
        """
        Turn the incoming post into a store row.

        The slug is resolved against posts created on the same day, ignoring
        the post being updated.
        """
        now = datetime.now(UTC)
        requested = _as_utc(blog_post.created_on) if blog_post.created_on else now
        created_on = requested
        if existing is not None and _as_utc(existing.created_on).date() == requested.date():
            created_on = _as_utc(existing.created_on)

        title = blog_post.title.strip() if blog_post.title else None
        slug = None
        if title or blog_post.slug:
            day = created_on

            async def owner_of(candidate: str) -> int | None:
                found = await self.posts.get_by_slug(candidate, day.year, day.month, day.day)
                return found.id if found else None

            slug = await next_unique_slug(
                slugify(blog_post.slug or title),
                owner_of,
                exclude_id=existing.id if existing else None,
            )

        category_id = blog_post.category_id
        if not category_id and not category_title:
            category_id = (await self.settings.get_blog_settings()).default_category_id

        return Post(
            id=existing.id if existing else 0,
            type=PostType.BLOG_POST,
            title=title,
            slug=slug,
            body=blog_post.body if blog_post.body and blog_post.body.strip() else None,
            excerpt=blog_post.excerpt if blog_post.excerpt and blog_post.excerpt.strip() else None,
            status=blog_post.status,
            comment_status=blog_post.comment_status,
            created_on=created_on,
            updated_on=now if blog_post.status == PostStatus.DRAFT else None,
            view_count=existing.view_count if existing else 0,
            user_id=blog_post.user_id,
            category_id=category_id,
        )

    @staticmethod
    def _to_blog_post(post: Post) -> BlogPost:
        return BlogPost(
            id=post.id,
            title=html_decode(post.title),
            slug=post.slug,
            body=post.body,
            excerpt=post.excerpt or get_excerpt(post.body),
            status=post.status,
            comment_status=post.comment_status,
            created_on=post.created_on,
            updated_on=post.updated_on,
            view_count=post.view_count,
            user_id=post.user_id,
            category_id=post.category_id,
            category_title=post.category.title if post.category else None,
            category=post.category,
            tag_titles=[t.title for t in post.tags],
            tags=post.tags,
        )
