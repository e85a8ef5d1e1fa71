# tests/routes/conftest.py
"""Shared fixtures for route tests."""

from collections.abc import AsyncGenerator
from io import BytesIO
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from PIL import Image

from fanblog.db import get_session
from fanblog.dependencies import (
    get_blog_post_service,
    get_category_service,
    get_image_service,
    get_page_service,
    get_tag_service,
)
from fanblog.main import app as fastapi_app
from fanblog.managers import CacheManager, limiter
from fanblog.services import BlogPostService, CategoryService, ImageService, PageService, TagService
from fanblog.services.storage import StorageService
from tests.fakes import FakeMediaStore


@pytest.fixture
def png_bytes() -> bytes:
    """Create valid PNG bytes wide enough for one variant."""
    img = Image.new("RGB", (800, 400), color="blue")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def mock_storage() -> MagicMock:
    mock = MagicMock(spec=StorageService)
    mock.save_file = AsyncMock(return_value=None)
    mock.delete_file = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def image_service(mock_storage: MagicMock) -> ImageService:
    return ImageService(FakeMediaStore(), mock_storage, endpoint="http://test", container="media")


@pytest.fixture
def db_session() -> MagicMock:
    """Session stand-in answering the health check."""
    session = MagicMock()
    session.execute = AsyncMock()
    return session


@pytest.fixture
def app(
    cache_manager: CacheManager,
    db_session: MagicMock,
    blog_post_service: BlogPostService,
    page_service: PageService,
    category_service: CategoryService,
    tag_service: TagService,
    image_service: ImageService,
) -> FastAPI:
    """The application with every service bound to the in-memory stores."""
    fastapi_app.state.cache_manager = cache_manager
    fastapi_app.dependency_overrides = {
        get_session: lambda: db_session,
        get_blog_post_service: lambda: blog_post_service,
        get_page_service: lambda: page_service,
        get_category_service: lambda: category_service,
        get_tag_service: lambda: tag_service,
        get_image_service: lambda: image_service,
    }
    return fastapi_app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """
    Create async HTTP client for testing FastAPI endpoints.

    Rate limiting is disabled and the overrides are removed afterwards.
    """
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    app.dependency_overrides = {}
    limiter.enabled = True
