"""Page schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from fanblog.schemas.enums import PostStatus


class Page(BaseModel):
    """
    A static page, either a parent or the child of one.

    A parent carries its children; a child fetched on its own carries its
    parent, whose children in turn have no parent set.
    """

    id: int = 0
    parent_id: int | None = None
    title: str | None = None
    slug: str | None = None
    body: str | None = None
    body_mark: str | None = None
    excerpt: str | None = None
    nav: str | None = None
    status: PostStatus = PostStatus.DRAFT
    created_on: datetime | None = None
    updated_on: datetime | None = None
    view_count: int = 0
    user_id: int = 0
    page_layout: int = 1
    parent: "Page | None" = None
    children: list["Page"] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_parent(self) -> bool:
        return not self.parent_id

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_children(self) -> bool:
        return bool(self.children)


class PageIn(BaseModel):
    """Request body for creating or updating a page."""

    parent_id: int | None = None
    title: str | None = Field(default=None, examples=["About"])
    body: str | None = None
    body_mark: str | None = None
    excerpt: str | None = None
    status: PostStatus = PostStatus.DRAFT
    created_on: datetime | None = None
    user_id: int = 0
    page_layout: int | None = None


class PageNavIn(BaseModel):
    nav_md: str = Field(..., description="Markdown with [[Title]] links to sibling pages")
