"""Exceptions raised when the store rejects or fails a write."""

from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR, HTTP_503_SERVICE_UNAVAILABLE

from fanblog.errors.base import BaseAppError, create_exception_handler
from fanblog.monitoring import get_logger

logger = get_logger(__name__)


class DatabaseError(BaseAppError):
    """A store operation failed for a reason other than a duplicate."""

    def __init__(self, detail: str = "Database error.", status_code: int = HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(detail, status_code)


class RecordWriteError(DatabaseError):
    """Flushing a post, page, taxonomy or media record failed; the session was rolled back."""

    def __init__(self, table: str, reason: str = "") -> None:
        self.table = table
        detail = f"Could not save {table} record." if not reason else f"Could not save {table} record: {reason}"
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


database_exception_handler = create_exception_handler(logger)
