"""Media routes: image upload, listing and deletion."""

from typing import Annotated

from fastapi import APIRouter, Form, Query, Request, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from fanblog.dependencies import ImageServiceDep
from fanblog.errors.upload import ERR_MSG_FILETYPE
from fanblog.managers import limiter
from fanblog.routes.posts import NOT_FOUND_RESPONSE, RATE_LIMIT_RESPONSE
from fanblog.schemas import MediaList, MediaResponse

router = APIRouter(prefix="/media", tags=["🖼️ Media"])


@router.post(
    "/images",
    response_class=ORJSONResponse,
    response_model=MediaResponse,
    status_code=HTTP_201_CREATED,
    summary="Upload an image",
    responses={
        413: {
            "description": "Too large",
            "content": {"application/json": {"example": {"detail": "File cannot be larger than 5MB."}}},
        },
        415: {
            "description": "Unsupported type",
            "content": {"application/json": {"example": {"detail": ERR_MSG_FILETYPE}}},
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="media_upload_image",
)
@limiter.limit("10/minute")
async def upload_image(
    request: Request,
    file: UploadFile,
    service: ImageServiceDep,
    user_id: Annotated[int, Form()] = 0,
) -> MediaResponse:
    """
    Upload a blog image.

    Parameters
    ----------
    request : Request
        Current request context.
    file : UploadFile
        A ``.jpg``, ``.jpeg``, ``.png`` or ``.gif`` image.
    service : ImageService
        Image service dependency.
    user_id : int
        Uploader.

    Returns
    -------
    MediaResponse
        The stored record with the URL of every size.
    """
    data = await file.read()
    media = await service.upload(
        data,
        user_id,
        file.filename or "",
        file.content_type or "",
    )
    return service.to_response(media)


@router.get(
    "/images",
    response_class=ORJSONResponse,
    response_model=MediaList,
    summary="List uploaded images",
    operation_id="media_list_images",
)
async def list_images(
    service: ImageServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 50,
) -> MediaList:
    media, total = await service.get_list(page, page_size)
    return MediaList(media=[service.to_response(m) for m in media], total_count=total)


@router.get(
    "/images/{media_id}",
    response_class=ORJSONResponse,
    response_model=MediaResponse,
    summary="Get an uploaded image",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="media_get_image",
)
async def get_image(media_id: int, service: ImageServiceDep) -> MediaResponse:
    return service.to_response(await service.get(media_id))


@router.delete(
    "/images/{media_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete an uploaded image",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="media_delete_image",
)
@limiter.limit("10/minute")
async def delete_image(request: Request, media_id: int, service: ImageServiceDep) -> Response:
    """Delete the image, every resized copy of it and its record."""
    await service.delete(media_id)
    return Response(status_code=HTTP_204_NO_CONTENT)
