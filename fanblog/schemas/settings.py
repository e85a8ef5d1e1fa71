"""Persisted blog settings."""

from pydantic import BaseModel, Field

from fanblog.configs.settings import DEFAULT_PAGE_SIZE


class BlogSettings(BaseModel):
    default_category_id: int = Field(default=1, ge=1)
    post_per_page: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
