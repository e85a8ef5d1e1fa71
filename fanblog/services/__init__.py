"""Business logic services."""

from fanblog.services.blog_post import BlogPostService, validate_post_title
from fanblog.services.handlers import register_blog_handlers
from fanblog.services.image import ImageService
from fanblog.services.page import PageService
from fanblog.services.settings import SettingService
from fanblog.services.taxonomy import CategoryService, TagService

__all__ = [
    "BlogPostService",
    "CategoryService",
    "ImageService",
    "PageService",
    "SettingService",
    "TagService",
    "register_blog_handlers",
    "validate_post_title",
]
