"""
Business rule errors raised by the blog services.

Each error maps to one HTTP status so the route layer never has to translate
them by hand; the registered handler turns them into JSON responses.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from fanblog.errors.base import BaseAppError, create_exception_handler
from fanblog.monitoring import get_logger

logger = get_logger(__name__)


class BlogError(BaseAppError):
    """Base exception for blog business rules."""

    def __init__(
        self,
        detail: str = "Blog operation failed",
        status_code: int = HTTP_400_BAD_REQUEST,
    ) -> None:
        super().__init__(detail, status_code)


class ValidationError(BlogError):
    """Raised when user input breaks a validation rule."""

    def __init__(
        self,
        detail: str = "Validation failed",
        errors: list[str] | None = None,
    ) -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)
        self.errors = errors or [detail]


class NotFoundError(BlogError):
    """Raised when a requested id or slug does not exist."""

    def __init__(self, detail: str = "The requested resource is not found.") -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class ConflictError(BlogError):
    """Raised when an operation is refused by a business rule."""

    def __init__(self, detail: str = "Operation conflicts with a business rule.") -> None:
        super().__init__(detail, HTTP_409_CONFLICT)


class DuplicateRecordError(BlogError):
    """Raised when a title or slug already exists in its scope."""

    def __init__(self, detail: str = "A record with this value already exists.") -> None:
        super().__init__(detail, HTTP_409_CONFLICT)


class SlugResolutionError(BlogError):
    """Raised when no free slug is found within the attempt budget."""

    def __init__(self, slug: str, attempts: int) -> None:
        detail = f"Could not find a unique slug for '{slug}' after {attempts} attempts."
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)
        self.slug = slug
        self.attempts = attempts


blog_exception_handler = create_exception_handler(logger)
