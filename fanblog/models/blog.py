"""Blog tables: posts (and pages), categories, tags and their link table."""

from datetime import UTC, datetime
from typing import cast

from sqlalchemy import DateTime, Index, Integer, Text
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from fanblog.configs.settings import (
    POST_TITLE_MAX_LENGTH,
    TAXONOMY_SLUG_MAX_LENGTH,
    TAXONOMY_TITLE_MAX_LENGTH,
)
from fanblog.schemas.enums import CommentStatus, PostStatus, PostType


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


class CategoryDB(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "categories")

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(sa_column=Column(String(TAXONOMY_TITLE_MAX_LENGTH), nullable=False))
    slug: str = Field(
        sa_column=Column(String(TAXONOMY_SLUG_MAX_LENGTH), unique=True, nullable=False, index=True),
    )
    description: str | None = Field(default=None, sa_column=Column(Text))
    count: int = Field(default=0, nullable=False)


class TagDB(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "tags")

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(sa_column=Column(String(TAXONOMY_TITLE_MAX_LENGTH), nullable=False))
    slug: str = Field(
        sa_column=Column(String(TAXONOMY_SLUG_MAX_LENGTH), unique=True, nullable=False, index=True),
    )
    description: str | None = Field(default=None, sa_column=Column(Text))
    count: int = Field(default=0, nullable=False)


class PostDB(SQLModel, table=True):
    """
    Blog posts and pages share this table, told apart by ``type``.

    Post slugs are unique per calendar day of ``created_on``; page slugs are
    unique among siblings. Both rules are enforced by the services.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_type_status_created", "type", "status", "created_on"),
        Index("ix_posts_slug", "slug"),
        Index("ix_posts_parent_id", "parent_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    type: str = Field(
        default=PostType.BLOG_POST,
        sa_column=Column(String(16), nullable=False),
    )
    title: str | None = Field(default=None, sa_column=Column(String(POST_TITLE_MAX_LENGTH)))
    slug: str | None = Field(default=None, sa_column=Column(String(POST_TITLE_MAX_LENGTH)))
    body: str | None = Field(default=None, sa_column=Column(Text))
    body_mark: str | None = Field(default=None, sa_column=Column(Text))
    excerpt: str | None = Field(default=None, sa_column=Column(Text))
    nav: str | None = Field(default=None, sa_column=Column(Text))
    status: str = Field(
        default=PostStatus.DRAFT,
        sa_column=Column(String(16), nullable=False),
    )
    comment_status: str = Field(
        default=CommentStatus.NO_COMMENTS,
        sa_column=Column(String(32), nullable=False),
    )
    created_on: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_on: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    view_count: int = Field(default=0, nullable=False)
    user_id: int = Field(default=0, nullable=False)
    category_id: int | None = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("categories.id", ondelete="SET NULL")),
    )
    parent_id: int | None = Field(default=None, sa_column=Column(Integer))
    page_layout: int = Field(default=1, nullable=False)


class PostTagDB(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "post_tags")

    post_id: int = Field(
        sa_column=Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    )
    tag_id: int = Field(
        sa_column=Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    )
