# tests/errors/test_base.py
"""Tests for fanblog/errors base classes and handlers."""

from unittest.mock import MagicMock

import orjson
import pytest
from fastapi.exceptions import RequestValidationError

from fanblog.errors import (
    BaseAppError,
    ConflictError,
    DuplicateRecordError,
    ImageTooLargeError,
    NotFoundError,
    SlugResolutionError,
    ValidationError,
    create_exception_handler,
    request_validation_exception_handler,
)


def _request(path: str = "/posts") -> MagicMock:
    request = MagicMock()
    request.client.host = "192.168.1.1"
    request.url.path = path
    return request


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        """Test default initialization values."""
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500

    def test_str_representation(self) -> None:
        """Test string representation returns the detail."""
        assert str(BaseAppError("Broken")) == "Broken"


class TestBlogErrors:
    """Tests for the status codes of the business rule errors."""

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ValidationError("bad"), 400),
            (NotFoundError(), 404),
            (ConflictError(), 409),
            (DuplicateRecordError(), 409),
            (SlugResolutionError("hello", 1000), 500),
        ],
    )
    def test_status_codes(self, error: BaseAppError, status_code: int) -> None:
        """Test each error maps to its HTTP status."""
        assert error.status_code == status_code

    def test_validation_error_lists_itself(self) -> None:
        """Test a ValidationError without explicit errors lists its detail."""
        assert ValidationError("Year must be provided.").errors == ["Year must be provided."]


class TestCreateExceptionHandler:
    """Tests for create_exception_handler factory function."""

    @pytest.mark.asyncio
    async def test_handler_with_blog_error(self) -> None:
        """Test the response carries the status and detail and the failure is logged."""
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(_request("/posts/9"), NotFoundError("Blog post with id 9 is not found."))

        assert response.status_code == 404
        assert orjson.loads(response.body) == {"detail": "Blog post with id 9 is not found."}
        logger.warning.assert_called_once_with(
            "Request failed",
            detail="Blog post with id 9 is not found.",
            status_code=404,
            ip="192.168.1.1",
            endpoint="/posts/9",
        )

    @pytest.mark.asyncio
    async def test_extra_attributes_in_payload(self) -> None:
        """Test attributes set by the error are added to the payload."""
        handler = create_exception_handler(MagicMock())
        error = ValidationError("'Title' must not be empty.", errors=["'Title' must not be empty."])

        response = await handler(_request(), error)

        assert response.status_code == 400
        assert orjson.loads(response.body) == {
            "detail": "'Title' must not be empty.",
            "errors": ["'Title' must not be empty."],
        }

    @pytest.mark.asyncio
    async def test_upload_error_payload(self) -> None:
        """Test upload errors report their limits."""
        handler = create_exception_handler(MagicMock())
        response = await handler(_request("/media/images"), ImageTooLargeError(max_size_mb=5, actual_size_mb=7.5))
        body = orjson.loads(response.body)
        assert response.status_code == 413
        assert body["max_size_mb"] == 5
        assert body["actual_size_mb"] == 7.5

    @pytest.mark.asyncio
    async def test_handler_with_generic_exception(self) -> None:
        """Test a plain exception falls back to 500."""
        handler = create_exception_handler(MagicMock())
        response = await handler(_request(), ValueError("Something went wrong"))
        assert response.status_code == 500
        assert orjson.loads(response.body) == {"detail": "Internal Server Error"}


class TestRequestValidationHandler:
    @pytest.mark.asyncio
    async def test_formats_field_errors(self) -> None:
        """Test each invalid field is reported with its dotted location."""
        exc = RequestValidationError(
            [
                {
                    "loc": ("body", "tag_titles", 0),
                    "msg": "Input should be a valid string",
                    "type": "string_type",
                },
            ],
        )

        response = await request_validation_exception_handler(_request(), exc)

        assert response.status_code == 422
        assert orjson.loads(response.body) == {
            "detail": "Validation failed",
            "errors": [
                {"field": "tag_titles.0", "message": "Input should be a valid string", "type": "string_type"},
            ],
        }
