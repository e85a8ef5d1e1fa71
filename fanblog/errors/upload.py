"""
Upload-related error classes.

Raised by the image service while validating and storing blog images.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from fanblog.errors.base import BaseAppError, create_exception_handler
from fanblog.monitoring import get_logger

logger = get_logger(__name__)

ERR_MSG_FILETYPE = "Only .jpg, .jpeg, .png and .gif are supported."
ERR_MSG_FILESIZE = "File cannot be larger than {max_size_mb}MB."


class UploadError(BaseAppError):
    """Base exception for media upload failures."""

    def __init__(
        self,
        detail: str = "Image upload failed.",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class ImageTooLargeError(UploadError):
    """The upload is larger than MEDIA_IMAGE_MAX_SIZE_MB."""

    def __init__(
        self,
        max_size_mb: int = 5,
        actual_size_mb: float | None = None,
    ) -> None:
        super().__init__(
            detail=ERR_MSG_FILESIZE.format(max_size_mb=max_size_mb),
            status_code=HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
        self.max_size_mb = max_size_mb
        self.actual_size_mb = actual_size_mb


class UnsupportedImageTypeError(UploadError):
    """The file extension or content type is not an accepted image type."""

    def __init__(
        self,
        file_name: str,
        content_type: str,
    ) -> None:
        super().__init__(detail=ERR_MSG_FILETYPE, status_code=HTTP_415_UNSUPPORTED_MEDIA_TYPE)
        self.file_name = file_name
        self.content_type = content_type


class InvalidImageError(UploadError):
    """The uploaded bytes could not be opened by Pillow."""

    def __init__(self, detail: str = "The file is not a readable image.") -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)


class ImageProcessingError(UploadError):
    """Resizing to one of the blog image widths failed."""

    def __init__(self, target_width: int | None = None) -> None:
        detail = "Could not resize image." if target_width is None else f"Could not resize image to {target_width}px."
        super().__init__(detail=detail, status_code=HTTP_500_INTERNAL_SERVER_ERROR)
        self.target_width = target_width


class StorageError(UploadError):
    """Writing or removing an image file in media storage failed."""

    def __init__(self, detail: str = "Could not store the image file.") -> None:
        super().__init__(detail=detail, status_code=HTTP_500_INTERNAL_SERVER_ERROR)


upload_exception_handler = create_exception_handler(logger)
