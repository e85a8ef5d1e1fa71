"""Pydantic schemas for the blog API and services."""

from fanblog.schemas.enums import (
    AppType,
    CommentStatus,
    ImageSize,
    PostListQueryType,
    PostStatus,
    PostType,
    UploadedFrom,
)
from fanblog.schemas.health import CacheHealthResponse, HealthCheckResponse
from fanblog.schemas.media import ImageResizeInfo, Media, MediaList, MediaResponse
from fanblog.schemas.page import Page, PageIn, PageNavIn
from fanblog.schemas.post import (
    ArchiveItem,
    BlogPost,
    BlogPostIn,
    BlogPostList,
    Post,
    PostListQuery,
)
from fanblog.schemas.settings import BlogSettings
from fanblog.schemas.taxonomy import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    Tag,
    TagCreate,
    TagUpdate,
)

__all__ = [
    "AppType",
    "ArchiveItem",
    "BlogPost",
    "BlogPostIn",
    "BlogPostList",
    "BlogSettings",
    "CacheHealthResponse",
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    "CommentStatus",
    "HealthCheckResponse",
    "ImageResizeInfo",
    "ImageSize",
    "Media",
    "MediaList",
    "MediaResponse",
    "Page",
    "PageIn",
    "PageNavIn",
    "Post",
    "PostListQuery",
    "PostListQueryType",
    "PostStatus",
    "PostType",
    "Tag",
    "TagCreate",
    "TagUpdate",
    "UploadedFrom",
]
