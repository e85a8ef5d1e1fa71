"""
Blog image service.

Validates uploads, stores the original plus up to four downsized variants,
and rewrites ``<img>`` tags in post bodies with ``srcset``/``sizes`` so
browsers can pick a variant.
"""

from datetime import UTC, datetime
from io import BytesIO
from pathlib import PurePath
from sys import maxsize

from bs4 import BeautifulSoup
from fastapi.concurrency import run_in_threadpool
from PIL import Image, UnidentifiedImageError

from fanblog.configs.settings import SLUG_MAX_ATTEMPTS, settings
from fanblog.errors import (
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    NotFoundError,
    SlugResolutionError,
    UnsupportedImageTypeError,
)
from fanblog.monitoring import get_logger
from fanblog.repositories import MediaStore
from fanblog.schemas import AppType, ImageResizeInfo, ImageSize, Media, MediaResponse, UploadedFrom
from fanblog.services.storage import StorageService
from fanblog.utils.slugs import random_token, slugify, uniquefy
from fanblog.utils.text import html_encode

logger = get_logger(__name__)

ACCEPTED_IMAGE_TYPES = (".jpg", ".jpeg", ".gif", ".png")

LARGE_IMG_SIZE = 2400
MEDIUM_LARGE_IMG_SIZE = 1800
MEDIUM_IMG_SIZE = 1200
SMALL_IMG_SIZE = 600

SIZE_FOLDERS: dict[ImageSize, str] = {
    ImageSize.LARGE: "lg",
    ImageSize.MEDIUM_LARGE: "ml",
    ImageSize.MEDIUM: "md",
    ImageSize.SMALL: "sm",
}

# Variants produced for each resize count, smallest first
VARIANTS_BY_COUNT: dict[int, tuple[ImageSize, ...]] = {
    1: (ImageSize.SMALL,),
    2: (ImageSize.SMALL, ImageSize.MEDIUM),
    3: (ImageSize.SMALL, ImageSize.MEDIUM, ImageSize.MEDIUM_LARGE),
    4: (ImageSize.SMALL, ImageSize.MEDIUM, ImageSize.MEDIUM_LARGE, ImageSize.LARGE),
}

BLOG_PATH_SEGMENT = f"{AppType.BLOG.value}/"


def get_image_path(uploaded_on: datetime, size: ImageSize) -> str:
    """``blog/{yyyy}/{mm}`` for the original, ``blog/{yyyy}/{mm}/{folder}`` otherwise."""
    base = f"{AppType.BLOG.value}/{uploaded_on.year}/{uploaded_on.month:02d}"
    return base if size == ImageSize.ORIGINAL else f"{base}/{SIZE_FOLDERS[size]}"


def get_image_resize_list(uploaded_on: datetime) -> list[ImageResizeInfo]:
    return [
        ImageResizeInfo(target_size=maxsize, path=get_image_path(uploaded_on, ImageSize.ORIGINAL)),
        ImageResizeInfo(target_size=LARGE_IMG_SIZE, path=get_image_path(uploaded_on, ImageSize.LARGE)),
        ImageResizeInfo(
            target_size=MEDIUM_LARGE_IMG_SIZE,
            path=get_image_path(uploaded_on, ImageSize.MEDIUM_LARGE),
        ),
        ImageResizeInfo(target_size=MEDIUM_IMG_SIZE, path=get_image_path(uploaded_on, ImageSize.MEDIUM)),
        ImageResizeInfo(target_size=SMALL_IMG_SIZE, path=get_image_path(uploaded_on, ImageSize.SMALL)),
    ]


def get_image_resize_list_for_gif(uploaded_on: datetime) -> list[ImageResizeInfo]:
    return [
        ImageResizeInfo(target_size=maxsize, path=get_image_path(uploaded_on, ImageSize.ORIGINAL)),
        ImageResizeInfo(target_size=SMALL_IMG_SIZE, path=get_image_path(uploaded_on, ImageSize.SMALL)),
    ]


def render_variants(data: bytes, resizes: list[ImageResizeInfo]) -> tuple[list[tuple[str, bytes]], int, int]:
    """
    Produce the bytes of every variant narrower than the original.

    Returns:
        ``(path, bytes)`` pairs starting with the untouched original, and the
        original width and height.

    Raises:
        InvalidImageError: If the bytes are not a readable image.
        ImageProcessingError: If resizing fails.
    """
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError from e

    width, height = img.size
    image_format = img.format or "PNG"
    variants: list[tuple[str, bytes]] = []
    for resize in resizes:
        if resize.target_size == maxsize:
            variants.append((resize.path, data))
            continue
        if width <= resize.target_size:
            continue
        try:
            target_height = max(1, round(height * resize.target_size / width))
            resized = img.resize((resize.target_size, target_height), Image.Resampling.LANCZOS)
            if image_format == "JPEG" and resized.mode not in ("RGB", "L"):
                resized = resized.convert("RGB")
            buffer = BytesIO()
            resized.save(buffer, format=image_format)
        except (OSError, ValueError) as e:
            raise ImageProcessingError(resize.target_size) from e
        variants.append((resize.path, buffer.getvalue()))
    return variants, width, height


class ImageService:
    """Uploads, URLs, responsive markup and deletion of blog images."""

    def __init__(
        self,
        media: MediaStore,
        storage: StorageService,
        endpoint: str = settings.STORAGE_ENDPOINT,
        container: str = settings.MEDIA_CONTAINER_NAME,
        max_size_mb: int = settings.MEDIA_IMAGE_MAX_SIZE_MB,
    ) -> None:
        self.media = media
        self.storage = storage
        self.endpoint = endpoint
        self.container = container
        self.max_size_mb = max_size_mb

    def get_absolute_url(self, media: Media, size: ImageSize) -> str:
        """
        Public URL of one variant of ``media``.

        Sizes that were never produced for this image fall back to the
        original, so a small upload asked for ``LARGE`` still resolves.
        """
        container = self.container if self.endpoint.endswith("/") else f"/{self.container}"
        count = media.resize_count
        if (
            size == ImageSize.ORIGINAL
            or count <= 0
            or (count == 1 and size != ImageSize.SMALL)
            or (count == 2 and size in (ImageSize.MEDIUM_LARGE, ImageSize.LARGE))
            or (count == 3 and size == ImageSize.LARGE)
        ):
            size = ImageSize.ORIGINAL
        return f"{self.endpoint}{container}/{get_image_path(media.uploaded_on, size)}/{media.file_name}"

    def to_response(self, media: Media) -> MediaResponse:
        urls = {size.value: self.get_absolute_url(media, size) for size in ImageSize}
        return MediaResponse(
            **media.model_dump(),
            url=urls[ImageSize.ORIGINAL.value],
            urls=urls,
        )

    def _validate(self, data: bytes, file_name: str, content_type: str) -> None:
        ext = PurePath(file_name).suffix.lower()
        ctype = "." + content_type.rsplit("/", 1)[-1].lower()
        if not ext or ext not in ACCEPTED_IMAGE_TYPES or ctype not in ACCEPTED_IMAGE_TYPES:
            raise UnsupportedImageTypeError(file_name=file_name, content_type=content_type)

        if len(data) > self.max_size_mb * 1024 * 1024:
            raise ImageTooLargeError(
                max_size_mb=self.max_size_mb,
                actual_size_mb=round(len(data) / (1024 * 1024), 2),
            )

    @staticmethod
    def process_file_name(file_name: str, uploaded_from: UploadedFrom) -> tuple[str, str]:
        """
        Slug the upload's name and keep its stem as the title.

        Returns:
            The slugged file name with its lowercased extension, and the
            HTML-encoded original stem.
        """
        path = PurePath(file_name)
        stem = path.stem[: settings.MEDIA_FILENAME_MAX_LENGTH]

        # Live Writer re-uploads images with a "_2" suffix
        if uploaded_from == UploadedFrom.METAWEBLOG and stem.endswith("_2"):
            stem = stem[:-2]

        slug = slugify(stem, random_chars_on_empty=0)
        if not slug:
            slug = random_token()
        elif uploaded_from == UploadedFrom.METAWEBLOG and slug == "thumb":
            slug = f"{random_token()}_thumb"

        return f"{slug}{path.suffix.lower()}", html_encode(stem) or slug

    async def get_unique_file_name(self, file_name: str, uploaded_on: datetime) -> str:
        """Append ``-2``, ``-3``... before the extension until no upload that month uses it."""
        path = PurePath(file_name)
        stem, ext = path.stem, path.suffix
        candidate = file_name
        for counter in range(2, SLUG_MAX_ATTEMPTS + 2):
            taken = await self.media.exists(candidate, uploaded_on.year, uploaded_on.month, AppType.BLOG)
            if not taken:
                return candidate
            stem = uniquefy(stem, counter)
            candidate = f"{stem}{ext}"
        raise SlugResolutionError(file_name, SLUG_MAX_ATTEMPTS)

    async def upload(
        self,
        data: bytes,
        user_id: int,
        file_name: str,
        content_type: str,
        uploaded_from: UploadedFrom = UploadedFrom.BROWSER,
    ) -> Media:
        """
        Validate, resize and store an image, then record it.

        Raises:
            UnsupportedImageTypeError: Extension or content type not accepted.
            ImageTooLargeError: Larger than the configured limit.
            InvalidImageError: Not a readable image.
        """
        self._validate(data, file_name, content_type)

        uploaded_on = datetime.now(UTC)
        slugged, title = self.process_file_name(file_name, uploaded_from)
        unique_name = await self.get_unique_file_name(slugged, uploaded_on)

        resizes = (
            get_image_resize_list_for_gif(uploaded_on)
            if content_type.lower() == "image/gif"
            else get_image_resize_list(uploaded_on)
        )
        variants, width, height = await run_in_threadpool(render_variants, data, resizes)

        for path, payload in variants:
            await self.storage.save_file(payload, unique_name, path)

        media = await self.media.create(
            Media(
                file_name=unique_name,
                title=title,
                uploaded_on=uploaded_on,
                width=width,
                height=height,
                resize_count=len(variants) - 1,
                content_type=content_type,
                length=len(data),
                app_type=AppType.BLOG,
                uploaded_from=uploaded_from,
                user_id=user_id,
            ),
        )
        logger.info("Image uploaded", file_name=unique_name, resize_count=media.resize_count)
        return media

    async def get(self, media_id: int) -> Media:
        media = await self.media.get(media_id)
        if media is None:
            raise NotFoundError(f"Media with id {media_id} is not found.")
        return media

    async def get_list(self, page_index: int, page_size: int) -> tuple[list[Media], int]:
        return await self.media.get_list(page_index, page_size)

    async def delete(self, media_id: int) -> None:
        """Remove the original, every produced variant and the record."""
        media = await self.get(media_id)
        sizes = (ImageSize.ORIGINAL, *VARIANTS_BY_COUNT.get(media.resize_count, ()))
        for size in sizes:
            await self.storage.delete_file(media.file_name, get_image_path(media.uploaded_on, size))
        await self.media.delete(media_id)
        logger.info("Image deleted", media_id=media_id, file_name=media.file_name)

    def get_srcset(self, media: Media) -> str:
        url = self.get_absolute_url
        small = f"{url(media, ImageSize.SMALL)} {SMALL_IMG_SIZE}w"
        medium = f"{url(media, ImageSize.MEDIUM)} {MEDIUM_IMG_SIZE}w"
        match media.resize_count:
            case 1:
                return f"{small}, {url(media, ImageSize.ORIGINAL)} {media.width}w"
            case 2:
                return f"{small}, {medium}, {url(media, ImageSize.ORIGINAL)} {media.width}w"
            case 3:
                return (
                    f"{small}, {medium}, {url(media, ImageSize.MEDIUM_LARGE)} 2x, "
                    f"{url(media, ImageSize.ORIGINAL)} 3x"
                )
            case _:
                return (
                    f"{small}, {medium}, {url(media, ImageSize.MEDIUM_LARGE)} 2x, "
                    f"{url(media, ImageSize.LARGE)} 3x"
                )

    async def _find_media(self, src: str) -> Media | None:
        file_name = src.rsplit("/", 1)[-1]
        start = src.find(BLOG_PATH_SEGMENT)
        if not file_name or start < 0:
            return None
        # "{yyyy}/{mm}" follows the app segment
        date_part = src[start + len(BLOG_PATH_SEGMENT) :]
        try:
            year, month = int(date_part[0:4]), int(date_part[5:7])
        except ValueError:
            return None
        return await self.media.get_by_file_name(file_name, year, month)

    async def process_responsive_images(self, body: str | None) -> str | None:
        """
        Add ``srcset`` and ``sizes`` to every ``<img>`` that points at a known upload.

        Bodies without such images come back unchanged.
        """
        if not body or "<img" not in body:
            return body

        soup = BeautifulSoup(body, "html.parser")
        changed = False
        for img in soup.find_all("img"):
            src = img.get("src")
            if not src or not isinstance(src, str):
                continue
            media = await self._find_media(src)
            if media is None or media.resize_count <= 0:
                continue

            width = min(media.width, MEDIUM_LARGE_IMG_SIZE)
            img["srcset"] = self.get_srcset(media)
            img["sizes"] = f"(max-width: {width}px) 100vw, {width}px"
            changed = True

        return str(soup) if changed else body
