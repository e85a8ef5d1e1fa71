"""
Cache keys and expirations for the blog.

Every key a mutation may have to purge is named here so invalidation is
enumerable instead of scattered through the services.
"""

from enum import IntEnum, StrEnum


class BlogCacheKey(StrEnum):
    """Keys of aggregate cache entries."""

    POSTS_INDEX = "blogposts_index"
    POSTS_RECENT = "blogposts_recent"
    ALL_CATS = "blogcategories_all"
    ALL_TAGS = "blogtags_all"
    ALL_ARCHIVES = "blogarchives_all"
    POST_COUNT = "blogpost_count"
    SETTINGS_BLOG = "settings_blog"


# Purged after every post mutation that can change a list or count
AGGREGATE_KEYS: tuple[BlogCacheKey, ...] = (
    BlogCacheKey.POSTS_INDEX,
    BlogCacheKey.POSTS_RECENT,
    BlogCacheKey.ALL_CATS,
    BlogCacheKey.ALL_TAGS,
    BlogCacheKey.ALL_ARCHIVES,
    BlogCacheKey.POST_COUNT,
)


class BlogCacheTTL(IntEnum):
    """Expiration in seconds per resource kind."""

    POSTS_INDEX = 3600
    POSTS_RECENT = 900
    ALL_CATS = 14 * 24 * 3600
    ALL_TAGS = 14 * 24 * 3600
    ALL_ARCHIVES = 14 * 24 * 3600
    POST_COUNT = 14 * 24 * 3600
    SINGLE_POST = 3600
    PARENT_PAGE = 24 * 3600
    CHILD_PAGE = 24 * 3600
    SETTINGS = 24 * 3600


def post_key(slug: str | None, year: int, month: int, day: int) -> str:
    """Generate cache key for a single post."""
    return f"post_{slug}_{year}_{month}_{day}"


def page_key(parent_slug: str, child_slug: str | None = None) -> str:
    """Generate cache key for a parent page or one of its children."""
    if child_slug:
        return f"page_{parent_slug}_{child_slug}"
    return f"page_{parent_slug}"
