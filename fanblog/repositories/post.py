"""Repository for blog posts and pages."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from sqlalchemy import Select, delete, func, or_, select, update
from sqlmodel import col

from fanblog.errors import NotFoundError
from fanblog.models import CategoryDB, PostDB, PostTagDB, TagDB
from fanblog.repositories.base import BaseRepository
from fanblog.schemas import (
    ArchiveItem,
    Category,
    Post,
    PostListQuery,
    PostListQueryType,
    PostStatus,
    PostType,
    Tag,
)


def _day_range(year: int, month: int, day: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, day, tzinfo=UTC)
    return start, start + timedelta(days=1)


def _month_range(year: int, month: int | None) -> tuple[datetime, datetime]:
    if month is None:
        return datetime(year, 1, 1, tzinfo=UTC), datetime(year + 1, 1, 1, tzinfo=UTC)
    start = datetime(year, month, 1, tzinfo=UTC)
    end = datetime(year + (month == 12), month % 12 + 1, 1, tzinfo=UTC)
    return start, end


class PostRepository(BaseRepository[PostDB]):
    """Reads and writes the ``posts`` table, attaching categories and tags."""

    model = PostDB

    async def _hydrate(self, rows: Sequence[PostDB]) -> list[Post]:
        if not rows:
            return []

        category_ids = {r.category_id for r in rows if r.category_id}
        categories: dict[int, Category] = {}
        if category_ids:
            result = await self.session.execute(
                select(CategoryDB).where(col(CategoryDB.id).in_(category_ids)),
            )
            categories = {c.id: Category.model_validate(c) for c in result.scalars()}

        tags: defaultdict[int, list[Tag]] = defaultdict(list)
        result = await self.session.execute(
            select(PostTagDB.post_id, TagDB)
            .join(TagDB, col(TagDB.id) == col(PostTagDB.tag_id))
            .where(col(PostTagDB.post_id).in_([r.id for r in rows])),
        )
        for post_id, tag in result.all():
            tags[post_id].append(Tag.model_validate(tag))

        return [
            Post(
                **row.model_dump(),
                category=categories.get(row.category_id) if row.category_id else None,
                tags=tags.get(row.id, []),
            )
            for row in rows
        ]

    async def get(self, post_id: int, post_type: PostType) -> Post | None:
        row = await self.get_by_id(post_id)
        if row is None or row.type != post_type:
            return None
        return (await self._hydrate([row]))[0]

    async def get_by_slug(self, slug: str, year: int, month: int, day: int) -> Post | None:
        """Blog post with ``slug`` created on the given calendar day."""
        start, end = _day_range(year, month, day)
        statement = (
            select(PostDB)
            .where(col(PostDB.type) == PostType.BLOG_POST)
            .where(col(PostDB.slug) == slug)
            .where(col(PostDB.created_on) >= start, col(PostDB.created_on) < end)
            .limit(1)
        )
        row = (await self.session.execute(statement)).scalar_one_or_none()
        return (await self._hydrate([row]))[0] if row else None

    async def find_children(self, parent_id: int) -> list[Post]:
        statement = (
            select(PostDB)
            .where(col(PostDB.type) == PostType.PAGE, col(PostDB.parent_id) == parent_id)
            .order_by(col(PostDB.created_on))
        )
        rows = (await self.session.execute(statement)).scalars().all()
        return await self._hydrate(rows)

    def _list_statement(self, query: PostListQuery) -> Select:
        statement = select(PostDB)
        published = col(PostDB.status) == PostStatus.PUBLISHED
        blog = col(PostDB.type) == PostType.BLOG_POST

        match query.query_type:
            case PostListQueryType.BLOG_POSTS | PostListQueryType.BLOG_PUBLISHED_POSTS_BY_NUMBER:
                statement = statement.where(blog, published)
            case PostListQueryType.BLOG_DRAFTS:
                statement = statement.where(blog, col(PostDB.status) == PostStatus.DRAFT)
            case PostListQueryType.BLOG_POSTS_BY_NUMBER:
                statement = statement.where(blog)
            case PostListQueryType.BLOG_POSTS_BY_CATEGORY:
                statement = (
                    statement.join(CategoryDB, col(CategoryDB.id) == col(PostDB.category_id))
                    .where(blog, published)
                    .where(func.lower(CategoryDB.slug) == (query.category_slug or "").lower())
                )
            case PostListQueryType.BLOG_POSTS_BY_TAG:
                statement = (
                    statement.join(PostTagDB, col(PostTagDB.post_id) == col(PostDB.id))
                    .join(TagDB, col(TagDB.id) == col(PostTagDB.tag_id))
                    .where(blog, published)
                    .where(func.lower(TagDB.slug) == (query.tag_slug or "").lower())
                )
            case PostListQueryType.BLOG_POSTS_ARCHIVE:
                start, end = _month_range(query.year or 1, query.month)
                statement = statement.where(
                    blog,
                    published,
                    col(PostDB.created_on) >= start,
                    col(PostDB.created_on) < end,
                )
            case PostListQueryType.PAGES:
                statement = statement.where(
                    col(PostDB.type) == PostType.PAGE,
                    or_(col(PostDB.parent_id).is_(None), col(PostDB.parent_id) == 0),
                )
            case PostListQueryType.PAGES_WITH_CHILDREN:
                statement = statement.where(col(PostDB.type) == PostType.PAGE)

        if query.query_type == PostListQueryType.BLOG_DRAFTS:
            return statement.order_by(col(PostDB.updated_on).desc())
        return statement.order_by(col(PostDB.created_on).desc())

    async def get_list(self, query: PostListQuery) -> tuple[list[Post], int]:
        """
        Run a list query.

        Returns:
            The page of posts and the total number of matches.
        """
        statement = self._list_statement(query)
        total = (
            await self.session.execute(select(func.count()).select_from(statement.subquery()))
        ).scalar_one()

        match query.query_type:
            case PostListQueryType.BLOG_POSTS | PostListQueryType.BLOG_POSTS_BY_CATEGORY | (
                PostListQueryType.BLOG_POSTS_BY_TAG
            ):
                page_index = max(query.page_index, 1)
                statement = statement.offset((page_index - 1) * query.page_size).limit(
                    query.page_size,
                )
            case PostListQueryType.BLOG_POSTS_BY_NUMBER | (
                PostListQueryType.BLOG_PUBLISHED_POSTS_BY_NUMBER
            ):
                statement = statement.limit(query.page_size)

        rows = (await self.session.execute(statement)).scalars().all()
        return await self._hydrate(rows), total

    async def get_archives(self) -> list[ArchiveItem]:
        """Published post counts per (year, month), newest first."""
        year = func.extract("year", PostDB.created_on)
        month = func.extract("month", PostDB.created_on)
        statement = (
            select(year, month, func.count())
            .where(
                col(PostDB.type) == PostType.BLOG_POST,
                col(PostDB.status) == PostStatus.PUBLISHED,
            )
            .group_by(year, month)
            .order_by(year.desc(), month.desc())
        )
        result = await self.session.execute(statement)
        return [ArchiveItem(year=int(y), month=int(m), count=c) for y, m, c in result.all()]

    async def count(self, post_type: PostType, status: PostStatus | None = None) -> int:
        statement = select(func.count()).select_from(PostDB).where(col(PostDB.type) == post_type)
        if status is not None:
            statement = statement.where(col(PostDB.status) == status)
        return (await self.session.execute(statement)).scalar_one()

    async def _resolve_category_id(self, post: Post, category_title: str | None) -> int | None:
        if not category_title:
            return post.category_id
        statement = select(CategoryDB.id).where(
            func.lower(CategoryDB.title) == category_title.lower(),
        )
        found = (await self.session.execute(statement)).scalar_one_or_none()
        return found if found is not None else post.category_id

    async def _link_tags(self, post_id: int, tag_titles: Iterable[str]) -> None:
        await self.session.execute(delete(PostTagDB).where(col(PostTagDB.post_id) == post_id))
        titles = {t.lower() for t in tag_titles if t and t.strip()}
        if not titles:
            return
        result = await self.session.execute(
            select(TagDB.id).where(func.lower(TagDB.title).in_(titles)),
        )
        for tag_id in result.scalars():
            self.session.add(PostTagDB(post_id=post_id, tag_id=tag_id))

    async def _refresh_counts(self) -> None:
        published_posts = select(PostDB.id).where(
            col(PostDB.type) == PostType.BLOG_POST,
            col(PostDB.status) == PostStatus.PUBLISHED,
        )
        category_count = (
            select(func.count())
            .where(col(PostDB.category_id) == col(CategoryDB.id))
            .where(col(PostDB.id).in_(published_posts))
            .scalar_subquery()
        )
        tag_count = (
            select(func.count())
            .select_from(PostTagDB)
            .where(col(PostTagDB.tag_id) == col(TagDB.id))
            .where(col(PostTagDB.post_id).in_(published_posts))
            .scalar_subquery()
        )
        await self.session.execute(update(CategoryDB).values(count=category_count))
        await self.session.execute(update(TagDB).values(count=tag_count))

    def _apply(self, row: PostDB, post: Post) -> None:
        fields = post.model_dump(exclude={"id", "category", "tags"})
        for name, value in fields.items():
            setattr(row, name, value)

    async def create(
        self,
        post: Post,
        category_title: str | None = None,
        tag_titles: Iterable[str] = (),
    ) -> Post:
        row = PostDB()
        self._apply(row, post)
        row.category_id = await self._resolve_category_id(post, category_title)
        row = await self._add_and_refresh(row)
        if post.type == PostType.BLOG_POST:
            await self._link_tags(row.id, tag_titles)  # type: ignore[arg-type]
            await self._refresh_counts()
            await self._flush()
        return (await self._hydrate([row]))[0]

    async def update(
        self,
        post: Post,
        category_title: str | None = None,
        tag_titles: Iterable[str] | None = None,
    ) -> Post:
        row = await self.get_by_id(post.id)
        if row is None:
            raise NotFoundError(f"Post with id {post.id} is not found.")
        self._apply(row, post)
        row.category_id = await self._resolve_category_id(post, category_title)
        row = await self._add_and_refresh(row)
        if tag_titles is not None:
            await self._link_tags(post.id, tag_titles)
        if post.type == PostType.BLOG_POST:
            await self._refresh_counts()
        await self._flush()
        return (await self._hydrate([row]))[0]

    async def delete(self, post_id: int) -> bool:
        deleted = await self.delete_by_id(post_id)
        if deleted:
            await self._refresh_counts()
            await self._flush()
        return deleted
