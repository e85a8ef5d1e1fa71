# tests/services/conftest.py
"""Pytest fixtures for services tests."""

from io import BytesIO
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from fanblog.services import ImageService
from fanblog.services.storage import StorageService
from tests.fakes import FakeMediaStore


def _image_bytes(width: int, height: int, image_format: str, mode: str = "RGB") -> bytes:
    img = Image.new(mode, (width, height), color="red")
    buffer = BytesIO()
    img.save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def small_png_bytes() -> bytes:
    """PNG narrower than the smallest variant."""
    return _image_bytes(400, 300, "PNG", "RGBA")


@pytest.fixture
def medium_jpeg_bytes() -> bytes:
    """JPEG wide enough for the small and medium variants only."""
    return _image_bytes(1500, 1000, "JPEG")


@pytest.fixture
def wide_jpeg_bytes() -> bytes:
    """JPEG wider than the large variant."""
    return _image_bytes(2600, 1300, "JPEG")


@pytest.fixture
def wide_gif_bytes() -> bytes:
    return _image_bytes(1300, 700, "GIF")


@pytest.fixture
def invalid_image_bytes() -> bytes:
    """Create invalid image bytes (not a real image)."""
    return b"not a valid image content"


@pytest.fixture
def mock_storage_service() -> MagicMock:
    """Create a mock storage service."""
    mock = MagicMock(spec=StorageService)
    mock.save_file = AsyncMock(return_value=None)
    mock.delete_file = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture
def image_service(media_store: FakeMediaStore, mock_storage_service: MagicMock) -> ImageService:
    """ImageService over the fake media store and mocked storage."""
    return ImageService(
        media_store,
        mock_storage_service,
        endpoint="https://cdn.example.com",
        container="media",
        max_size_mb=1,
    )
