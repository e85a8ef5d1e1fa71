"""
Initial schema: posts, pages, taxonomy, media and settings.

Revision ID: 0001
Revises:
Create Date: 2026-10-17

- categories / tags: taxonomy with globally unique slugs
- posts: blog posts and pages, told apart by ``type``
- post_tags: post to tag links, removed with either side
- media: uploaded images and their resize counts
- meta: key/value blog settings
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# Revision identifiers, used by Alembic
revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Apply schema changes for this revision."""
    for table in ("categories", "tags"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=24), nullable=False),
            sa.Column("slug", sa.String(length=24), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("count", sa.Integer(), nullable=False, server_default="0"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table}_slug", table, ["slug"], unique=True)

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("title", sa.String(length=250), nullable=True),
        sa.Column("slug", sa.String(length=250), nullable=True),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("body_mark", sa.Text(), nullable=True),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("nav", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("comment_status", sa.String(length=32), nullable=False),
        sa.Column("created_on", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("user_id", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("page_layout", sa.Integer(), nullable=False, server_default="1"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_posts_type_status_created", "posts", ["type", "status", "created_on"])
    op.create_index("ix_posts_slug", "posts", ["slug"])
    op.create_index("ix_posts_parent_id", "posts", ["parent_id"])

    op.create_table(
        "post_tags",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "tag_id"),
    )

    op.create_table(
        "media",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("file_name", sa.String(length=256), nullable=False),
        sa.Column("title", sa.String(length=256), nullable=True),
        sa.Column("uploaded_on", sa.DateTime(timezone=True), nullable=False),
        sa.Column("width", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("height", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("resize_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("content_type", sa.String(length=64), nullable=False),
        sa.Column("length", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("app_type", sa.String(length=16), nullable=False),
        sa.Column("uploaded_from", sa.String(length=16), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_media_app_type_file_name", "media", ["app_type", "file_name"])

    op.create_table(
        "meta",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(length=256), nullable=False),
        sa.Column("value", sa.String(length=4000), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_meta_key", "meta", ["key"], unique=True)

    # Posts fall back to this category; it can be renamed but not deleted
    op.execute("INSERT INTO categories (title, slug, count) VALUES ('Uncategorized', 'uncategorized', 0)")


def downgrade() -> None:
    """Revert schema changes for this revision."""
    op.drop_index("ix_meta_key", table_name="meta")
    op.drop_table("meta")
    op.drop_index("ix_media_app_type_file_name", table_name="media")
    op.drop_table("media")
    op.drop_table("post_tags")
    op.drop_index("ix_posts_parent_id", table_name="posts")
    op.drop_index("ix_posts_slug", table_name="posts")
    op.drop_index("ix_posts_type_status_created", table_name="posts")
    op.drop_table("posts")
    for table in ("tags", "categories"):
        op.drop_index(f"ix_{table}_slug", table_name=table)
        op.drop_table(table)
