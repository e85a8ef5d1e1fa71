"""
Post schemas.

``Post`` is the row shape the repositories hand back, with its category and
tags already attached. ``BlogPost`` is what the blog service accepts and
returns; pages have their own schema in :mod:`fanblog.schemas.page`.
"""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from fanblog.configs.settings import DEFAULT_PAGE_INDEX, DEFAULT_PAGE_SIZE
from fanblog.schemas.enums import CommentStatus, PostListQueryType, PostStatus, PostType
from fanblog.schemas.taxonomy import Category, Tag


class Post(BaseModel):
    """A stored blog post or page."""

    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    type: PostType = PostType.BLOG_POST
    title: str | None = None
    slug: str | None = None
    body: str | None = None
    body_mark: str | None = None
    excerpt: str | None = None
    nav: str | None = None
    status: PostStatus = PostStatus.DRAFT
    comment_status: CommentStatus = CommentStatus.NO_COMMENTS
    created_on: datetime
    updated_on: datetime | None = None
    view_count: int = 0
    user_id: int = 0
    category_id: int | None = None
    parent_id: int | None = None
    page_layout: int = 1
    category: Category | None = None
    tags: list[Tag] = Field(default_factory=list)


class BlogPost(BaseModel):
    """A blog post with its category and tag titles resolved."""

    id: int = 0
    title: str | None = None
    slug: str | None = None
    body: str | None = None
    excerpt: str | None = None
    status: PostStatus = PostStatus.DRAFT
    comment_status: CommentStatus = CommentStatus.NO_COMMENTS
    created_on: datetime | None = None
    updated_on: datetime | None = None
    view_count: int = 0
    user_id: int = 0
    category_id: int | None = None
    category_title: str | None = None
    category: Category | None = None
    tag_titles: list[str] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)


class BlogPostIn(BaseModel):
    """Request body for creating or updating a blog post."""

    title: str | None = Field(default=None, examples=["Hello World"])
    slug: str | None = None
    body: str | None = None
    excerpt: str | None = None
    status: PostStatus = PostStatus.DRAFT
    comment_status: CommentStatus = CommentStatus.ALLOW_COMMENTS
    created_on: datetime | None = None
    user_id: int = 0
    category_id: int | None = None
    category_title: str | None = None
    tag_titles: list[str] = Field(default_factory=list)


class BlogPostList(BaseModel):
    posts: list[BlogPost] = Field(default_factory=list)
    total_post_count: int = 0


class ArchiveItem(BaseModel):
    """Number of published posts in one month."""

    year: int
    month: int
    count: int


@dataclass(slots=True)
class PostListQuery:
    """Parameters of a paginated post list query."""

    query_type: PostListQueryType
    page_index: int = DEFAULT_PAGE_INDEX
    page_size: int = DEFAULT_PAGE_SIZE
    category_slug: str | None = None
    tag_slug: str | None = None
    year: int | None = None
    month: int | None = None
