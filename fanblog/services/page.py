"""
Page service.

Pages form a two level tree: parents sit at the site root (``/about``) and
children under their parent (``/about/team``). Titles and slugs are unique
among siblings, and parent slugs may not shadow a reserved route.
"""

from datetime import UTC, datetime
from re import Match
from re import compile as re_compile
from urllib.parse import quote_plus

from pydantic import TypeAdapter

from fanblog.configs.settings import POST_TITLE_MAX_LENGTH
from fanblog.errors import DuplicateRecordError, NotFoundError
from fanblog.managers import BlogCache
from fanblog.monitoring import get_logger
from fanblog.repositories import PostStore
from fanblog.schemas import CommentStatus, Page, Post, PostListQuery, PostListQueryType, PostStatus, PostType
from fanblog.services.blog_post import validate_post_title
from fanblog.utils.cache_keys import BlogCacheTTL, page_key
from fanblog.utils.slugs import slugify
from fanblog.utils.text import html_encode, md_to_html

logger = get_logger(__name__)

DUPLICATE_TITLE_MSG = "A page with same title exists, please choose a different one."
DUPLICATE_SLUG_MSG = (
    "Page slug generated from your title conflicts with another page, please choose a different title."
)
RESERVED_SLUG_MSG = "Page title conflicts with reserved URL '{slug}', please choose a different one."

RESERVED_SLUGS = frozenset(
    {
        "admin", "account", "api", "app", "apps", "assets",
        "blog", "blogs",
        "denied",
        "feed", "feeds", "forum", "forums",
        "image", "images", "img",
        "login", "logout",
        "media",
        "plugin", "plugins", "post", "posts", "preview",
        "register", "rsd",
        "setup", "static",
        "theme", "themes",
        "user", "users",
        "widget", "widgets",
    },
)  # fmt: skip

DOUBLE_BRACKETS = re_compile(r"\[\[(.*?)\]\]")

_PAGE = TypeAdapter(Page)


def slugify_page_title(title: str | None) -> str | None:
    """
    Slug for a page title.

    Titles with no Latin characters (e.g. Chinese) are URL-encoded instead,
    so ``你好`` becomes ``%E4%BD%A0%E5%A5%BD``.
    """
    if not title:
        return title
    slug = slugify(title, POST_TITLE_MAX_LENGTH, random_chars_on_empty=0)
    return slug or quote_plus(title)[:POST_TITLE_MAX_LENGTH]


def _link_target(text: str, parent_slug: str | None) -> str:
    slug = slugify_page_title(text) or ""
    if parent_slug and parent_slug != slug:
        return f"{parent_slug}/{slug}"
    return slug


def _replace_tokens(text: str, parent_slug: str | None) -> str:
    return DOUBLE_BRACKETS.sub(
        lambda m: f'[{m.group(1)}](/{_link_target(m.group(1), parent_slug)} "{m.group(1)}")',
        text,
    )


def parse_nav_links(body: str | None, parent_slug: str | None) -> str | None:
    """
    Replace every ``[[Title]]`` in an HTML body with a link to that page.

    Examples:
        >>> parse_nav_links("<p>See [[Team]]</p>", "about")
        '<p>See <a href="/about/team" title="Team">Team</a></p>'
    """
    if not body:
        return body

    def to_html(match: Match[str]) -> str:
        text = match.group(1)
        link = md_to_html(f'[{text}](/{_link_target(text, parent_slug)} "{text}")')
        return link.removeprefix("<p>").removesuffix("</p>")

    return DOUBLE_BRACKETS.sub(to_html, body)


def nav_md_to_html(nav_md: str | None, parent_slug: str | None) -> str | None:
    """Render a navigation Markdown document, resolving ``[[Title]]`` links first."""
    if not nav_md:
        return nav_md
    return md_to_html(_replace_tokens(nav_md, parent_slug))


def _to_page(post: Post) -> Page:
    return Page(
        id=post.id,
        parent_id=post.parent_id,
        title=post.title,
        slug=post.slug,
        body=post.body,
        body_mark=post.body_mark,
        excerpt=post.excerpt,
        nav=post.nav,
        status=post.status,
        created_on=post.created_on,
        updated_on=post.updated_on,
        view_count=post.view_count,
        user_id=post.user_id,
        page_layout=post.page_layout,
    )


def _same(a: str | None, b: str | None) -> bool:
    return (a or "").casefold() == (b or "").casefold()


class PageService:
    def __init__(self, posts: PostStore, cache: BlogCache) -> None:
        self.posts = posts
        self.cache = cache

    async def _query_post(self, page_id: int) -> Post:
        post = await self.posts.get(page_id, PostType.PAGE)
        if post is None:
            raise NotFoundError(f"Page with id {page_id} is not found.")
        return post

    async def _with_children(self, post: Post) -> Page:
        page = _to_page(post)
        page.children = [_to_page(c) for c in await self.posts.find_children(post.id)]
        return page

    async def _cache_key(self, post: Post) -> str:
        if post.parent_id:
            parent = await self._query_post(post.parent_id)
            return page_key(parent.slug or "", post.slug)
        return page_key(post.slug or "")

    # --- reads ---

    async def get(self, page_id: int) -> Page:
        """
        Page by id.

        A parent comes with its children; a child comes with its parent, and
        that parent with all of its children.
        """
        post = await self._query_post(page_id)
        if not post.parent_id:
            return await self._with_children(post)

        page = _to_page(post)
        page.parent = await self._with_children(await self._query_post(post.parent_id))
        return page

    async def get_parents(self, with_children: bool = False) -> list[Page]:
        query_type = PostListQueryType.PAGES_WITH_CHILDREN if with_children else PostListQueryType.PAGES
        posts, _ = await self.posts.get_list(PostListQuery(query_type))
        pages = [_to_page(p) for p in posts]
        if not with_children:
            return pages

        parents = [p for p in pages if p.is_parent]
        for parent in parents:
            parent.children = [p for p in pages if p.parent_id == parent.id]
        return parents

    async def get_by_slugs(self, *slugs: str) -> Page:
        """
        Published page at ``/{parent}`` or ``/{parent}/{child}``.

        Raises:
            NotFoundError: If either page is missing or still a draft.
        """
        if not slugs or not slugs[0]:
            raise NotFoundError("Page does not exist.")
        if slugs[0] == "preview":
            raise NotFoundError("Page does not exist.")

        parent_slug = quote_plus(slugs[0])
        child_slug = quote_plus(slugs[1]) if len(slugs) > 1 and slugs[1] else None

        async def load() -> Page:
            parents = await self.get_parents(with_children=True)
            page = next((p for p in parents if _same(p.slug, parent_slug)), None)
            if page is None or page.status == PostStatus.DRAFT:
                raise NotFoundError(f"Page '{slugs[0]}' does not exist.")
            if child_slug:
                child = next((c for c in page.children if _same(c.slug, child_slug)), None)
                if child is None or child.status == PostStatus.DRAFT:
                    raise NotFoundError(f"Page '{slugs[1]}' does not exist.")
                # Copies keep the parent's children free of back references
                parent = page.model_copy(update={"children": [c.model_copy() for c in page.children]})
                child.parent = parent
                return child
            return page

        if child_slug:
            return await self.cache.get_or_set(
                page_key(parent_slug, child_slug), load, BlogCacheTTL.CHILD_PAGE, adapter=_PAGE,
            )
        return await self.cache.get_or_set(
            page_key(parent_slug), load, BlogCacheTTL.PARENT_PAGE, adapter=_PAGE,
        )

    # --- writes ---

    async def create(self, page: Page) -> Page:
        await self.ensure_page_title(page)
        post = await self._to_post(page)
        created = await self.posts.create(post)
        await self.posts.commit()
        logger.info("Page created", id=created.id, slug=created.slug, parent_id=created.parent_id)
        return await self.get(created.id)

    async def update(self, page: Page) -> Page:
        await self.ensure_page_title(page)
        original = await self._query_post(page.id)
        old_key = await self._cache_key(original)

        post = await self._to_post(page, original)
        updated = await self.posts.update(post)
        await self.posts.commit()

        await self.cache.remove(old_key, await self._cache_key(updated))
        logger.info("Page updated", id=updated.id, slug=updated.slug)
        return await self.get(updated.id)

    async def delete(self, page_id: int) -> None:
        post = await self._query_post(page_id)
        key = await self._cache_key(post)
        await self.posts.delete(page_id)
        await self.posts.commit()
        await self.cache.remove(key)
        logger.info("Page deleted", id=page_id, slug=post.slug)

    async def save_nav(self, page_id: int, nav_md: str) -> None:
        post = await self._query_post(page_id)
        post.nav = nav_md
        await self.posts.update(post)
        await self.posts.commit()
        await self.cache.remove(await self._cache_key(post))

    # --- rules ---

    async def _siblings(self, page: Page) -> list[Page]:
        """Pages sharing ``page``'s level, the page itself left out."""
        if page.is_parent:
            siblings = await self.get_parents()
        else:
            siblings = (await self.get(page.parent_id)).children  # type: ignore[arg-type]
        return [p for p in siblings if page.id <= 0 or p.id != page.id]

    async def ensure_page_title(self, page: Page) -> None:
        """
        Raises:
            ValidationError: If the title breaks the title rules.
            DuplicateRecordError: If a sibling already has the title.
        """
        validate_post_title(page.title, page.status)
        if not page.title:
            return
        if any(_same(p.title, page.title) for p in await self._siblings(page)):
            raise DuplicateRecordError(DUPLICATE_TITLE_MSG)

    async def ensure_page_slug(self, slug: str | None, page: Page) -> None:
        if not slug:
            return
        if any(p.slug == slug for p in await self._siblings(page)):
            raise DuplicateRecordError(DUPLICATE_SLUG_MSG)
        if page.is_parent and slug in RESERVED_SLUGS:
            raise DuplicateRecordError(RESERVED_SLUG_MSG.format(slug=slug))

    async def _to_post(self, page: Page, existing: Post | None = None) -> Post:
        parent_slug = None
        if page.parent_id:
            parent_slug = (await self._query_post(page.parent_id)).slug

        now = datetime.now(UTC)
        created_on = page.created_on or now
        if existing is not None:
            created_on = existing.created_on
            if page.created_on and existing.created_on.date() != page.created_on.date():
                created_on = page.created_on

        slug = slugify_page_title(page.title)
        await self.ensure_page_slug(slug, page)

        return Post(
            id=existing.id if existing else 0,
            type=PostType.PAGE,
            parent_id=page.parent_id or None,
            title=page.title,
            slug=slug,
            body=parse_nav_links(page.body, parent_slug or slug),
            body_mark=html_encode(page.body_mark),
            excerpt=page.excerpt,
            nav=existing.nav if existing else None,
            status=page.status,
            comment_status=CommentStatus.NO_COMMENTS,
            created_on=created_on,
            updated_on=now,
            view_count=existing.view_count if existing else 0,
            user_id=page.user_id,
            page_layout=page.page_layout or 1,
        )
