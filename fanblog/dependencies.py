"""
Application dependencies.

Every request gets one database session; repositories and services are
built over it. The cache manager is created at startup and lives on
``app.state``.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fanblog.db import get_session
from fanblog.events import EventBus
from fanblog.managers import BlogCache, CacheManager
from fanblog.repositories import (
    CategoryRepository,
    MediaRepository,
    MetaRepository,
    PostRepository,
    TagRepository,
)
from fanblog.services import (
    BlogPostService,
    CategoryService,
    ImageService,
    PageService,
    SettingService,
    TagService,
    register_blog_handlers,
)
from fanblog.services.storage import StorageService, get_storage_service

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_cache_manager(request: Request) -> CacheManager:
    """
    Retrieve the CacheManager instance from the application state.

    Raises:
        RuntimeError: If the app was started without its lifespan.
    """
    cache_manager: CacheManager | None = getattr(request.app.state, "cache_manager", None)
    if cache_manager is None:
        mssg = "CacheManager not initialized in app.state"
        raise RuntimeError(mssg)
    return cache_manager


def get_blog_cache(cache_manager: Annotated[CacheManager, Depends(get_cache_manager)]) -> BlogCache:
    return BlogCache(cache_manager)


BlogCacheDep = Annotated[BlogCache, Depends(get_blog_cache)]


def get_setting_service(session: SessionDep, cache: BlogCacheDep) -> SettingService:
    return SettingService(MetaRepository(session), cache)


SettingServiceDep = Annotated[SettingService, Depends(get_setting_service)]


def get_category_service(
    session: SessionDep,
    settings_service: SettingServiceDep,
    cache: BlogCacheDep,
) -> CategoryService:
    return CategoryService(CategoryRepository(session), settings_service, cache)


def get_tag_service(session: SessionDep, cache: BlogCacheDep) -> TagService:
    return TagService(TagRepository(session), cache)


CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
TagServiceDep = Annotated[TagService, Depends(get_tag_service)]


def get_image_service(
    session: SessionDep,
    storage: Annotated[StorageService, Depends(get_storage_service)],
) -> ImageService:
    return ImageService(MediaRepository(session), storage)


ImageServiceDep = Annotated[ImageService, Depends(get_image_service)]


def get_blog_post_service(
    session: SessionDep,
    settings_service: SettingServiceDep,
    cache: BlogCacheDep,
    categories: CategoryServiceDep,
    tags: TagServiceDep,
    images: ImageServiceDep,
) -> BlogPostService:
    """Blog post service with the taxonomy handlers subscribed for this request."""
    bus = register_blog_handlers(EventBus(), categories, tags)
    return BlogPostService(PostRepository(session), settings_service, cache, bus, images)


def get_page_service(session: SessionDep, cache: BlogCacheDep) -> PageService:
    return PageService(PostRepository(session), cache)


BlogPostServiceDep = Annotated[BlogPostService, Depends(get_blog_post_service)]
PageServiceDep = Annotated[PageService, Depends(get_page_service)]
