"""
Store interfaces the services depend on.

The SQL repositories in this package implement them; tests substitute
in-memory fakes.
"""

from collections.abc import Iterable
from typing import Protocol

from fanblog.schemas import (
    AppType,
    ArchiveItem,
    Category,
    Media,
    Post,
    PostListQuery,
    PostStatus,
    PostType,
    Tag,
)


class PostStore(Protocol):
    async def commit(self) -> None: ...

    async def get(self, post_id: int, post_type: PostType) -> Post | None: ...

    async def get_by_slug(self, slug: str, year: int, month: int, day: int) -> Post | None: ...

    async def find_children(self, parent_id: int) -> list[Post]: ...

    async def get_list(self, query: PostListQuery) -> tuple[list[Post], int]: ...

    async def get_archives(self) -> list[ArchiveItem]: ...

    async def count(self, post_type: PostType, status: PostStatus | None = None) -> int: ...

    async def create(
        self,
        post: Post,
        category_title: str | None = None,
        tag_titles: Iterable[str] = (),
    ) -> Post: ...

    async def update(
        self,
        post: Post,
        category_title: str | None = None,
        tag_titles: Iterable[str] | None = None,
    ) -> Post: ...

    async def delete(self, post_id: int) -> bool: ...


class CategoryStore(Protocol):
    async def commit(self) -> None: ...

    async def get_list(self) -> list[Category]: ...

    async def get(self, category_id: int) -> Category | None: ...

    async def create(self, category: Category) -> Category: ...

    async def update(self, category: Category) -> Category: ...

    async def delete(self, category_id: int, default_category_id: int) -> None: ...


class TagStore(Protocol):
    async def commit(self) -> None: ...

    async def get_list(self) -> list[Tag]: ...

    async def get(self, tag_id: int) -> Tag | None: ...

    async def create(self, tag: Tag) -> Tag: ...

    async def update(self, tag: Tag) -> Tag: ...

    async def delete(self, tag_id: int) -> None: ...


class MediaStore(Protocol):
    async def get(self, media_id: int) -> Media | None: ...

    async def get_by_file_name(self, file_name: str, year: int, month: int) -> Media | None: ...

    async def exists(self, file_name: str, year: int, month: int, app_type: AppType) -> bool: ...

    async def get_list(self, page_index: int, page_size: int) -> tuple[list[Media], int]: ...

    async def create(self, media: Media) -> Media: ...

    async def delete(self, media_id: int) -> bool: ...


class MetaStore(Protocol):
    async def commit(self) -> None: ...

    async def get_values(self, prefix: str) -> dict[str, str]: ...

    async def upsert(self, values: dict[str, str]) -> None: ...
