from fanblog.errors.base import BASE_EXCEPTION, BaseAppError, create_exception_handler, host
from fanblog.errors.blog import (
    BlogError,
    ConflictError,
    DuplicateRecordError,
    NotFoundError,
    SlugResolutionError,
    ValidationError,
    blog_exception_handler,
)
from fanblog.errors.cache import (
    CacheDeserializationError,
    CacheExceptionError,
    CacheKeyError,
    CacheSerializationError,
    cache_exception_handler,
)
from fanblog.errors.database import (
    DatabaseError,
    RecordWriteError,
    database_exception_handler,
)
from fanblog.errors.upload import (
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from fanblog.errors.validation import request_validation_exception_handler

__all__ = [
    "BASE_EXCEPTION",
    "BaseAppError",
    "BlogError",
    "CacheDeserializationError",
    "CacheExceptionError",
    "CacheKeyError",
    "CacheSerializationError",
    "ConflictError",
    "DatabaseError",
    "DuplicateRecordError",
    "ImageProcessingError",
    "ImageTooLargeError",
    "InvalidImageError",
    "NotFoundError",
    "RecordWriteError",
    "SlugResolutionError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "ValidationError",
    "blog_exception_handler",
    "cache_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "host",
    "request_validation_exception_handler",
    "upload_exception_handler",
]
