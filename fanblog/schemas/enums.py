"""Enumerations shared by the blog schemas and tables."""

from enum import StrEnum


class PostStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"


class PostType(StrEnum):
    BLOG_POST = "blog_post"
    PAGE = "page"


class CommentStatus(StrEnum):
    NO_COMMENTS = "no_comments"
    ALLOW_COMMENTS = "allow_comments"
    ALLOW_COMMENTS_WITH_APPROVAL = "allow_comments_with_approval"


class PostListQueryType(StrEnum):
    """Which slice of the posts table a list query returns."""

    BLOG_POSTS = "blog_posts"
    BLOG_DRAFTS = "blog_drafts"
    BLOG_POSTS_BY_CATEGORY = "blog_posts_by_category"
    BLOG_POSTS_BY_TAG = "blog_posts_by_tag"
    BLOG_POSTS_ARCHIVE = "blog_posts_archive"
    BLOG_POSTS_BY_NUMBER = "blog_posts_by_number"
    BLOG_PUBLISHED_POSTS_BY_NUMBER = "blog_published_posts_by_number"
    PAGES = "pages"
    PAGES_WITH_CHILDREN = "pages_with_children"


class ImageSize(StrEnum):
    ORIGINAL = "original"
    LARGE = "large"
    MEDIUM_LARGE = "medium_large"
    MEDIUM = "medium"
    SMALL = "small"


class AppType(StrEnum):
    BLOG = "blog"


class UploadedFrom(StrEnum):
    BROWSER = "browser"
    METAWEBLOG = "metaweblog"
