"""Media schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from fanblog.schemas.enums import AppType, UploadedFrom


class Media(BaseModel):
    """An uploaded image and the number of resized variants produced for it."""

    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    file_name: str
    title: str | None = None
    uploaded_on: datetime
    width: int = 0
    height: int = 0
    resize_count: int = 0
    content_type: str
    length: int = 0
    app_type: AppType = AppType.BLOG
    uploaded_from: UploadedFrom = UploadedFrom.BROWSER
    user_id: int = 0


class MediaResponse(Media):
    url: str
    urls: dict[str, str]


class ImageResizeInfo(BaseModel):
    """One variant to produce: the longest side it is resized to and where it goes."""

    target_size: int
    path: str


class MediaList(BaseModel):
    media: list[MediaResponse]
    total_count: int = 0
