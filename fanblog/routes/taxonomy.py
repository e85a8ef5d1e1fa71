"""Category and tag routes."""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from fanblog.dependencies import CategoryServiceDep, TagServiceDep
from fanblog.managers import limiter
from fanblog.routes.posts import RATE_LIMIT_RESPONSE, WRITE_LIMIT
from fanblog.schemas import Category, CategoryCreate, CategoryUpdate, Tag, TagCreate, TagUpdate

categories_router = APIRouter(prefix="/categories", tags=["🗂️ Categories"])
tags_router = APIRouter(prefix="/tags", tags=["🏷️ Tags"])

DUPLICATE_RESPONSE = {
    "description": "Title taken",
    "content": {"application/json": {"example": {"detail": "'Technology' already exists."}}},
}


@categories_router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[Category],
    summary="List categories",
    operation_id="categories_list",
)
async def list_categories(service: CategoryServiceDep) -> list[Category]:
    return await service.get_all()


@categories_router.get(
    "/by-id/{category_id}",
    response_class=ORJSONResponse,
    response_model=Category,
    summary="Get a category by id",
    operation_id="categories_get",
)
async def get_category(category_id: int, service: CategoryServiceDep) -> Category:
    return await service.get(category_id)


@categories_router.get(
    "/{slug}",
    response_class=ORJSONResponse,
    response_model=Category,
    summary="Get a category by slug",
    operation_id="categories_get_by_slug",
)
async def get_category_by_slug(slug: str, service: CategoryServiceDep) -> Category:
    return await service.get_by_slug(slug)


@categories_router.post(
    "",
    response_class=ORJSONResponse,
    response_model=Category,
    status_code=HTTP_201_CREATED,
    summary="Create a category",
    responses={409: DUPLICATE_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="categories_create",
)
@limiter.limit(WRITE_LIMIT)
async def create_category(
    request: Request,
    category: CategoryCreate,
    service: CategoryServiceDep,
) -> Category:
    """
    Create a category.

    Parameters
    ----------
    request : Request
        Current request context.
    category : CategoryCreate
        Title (HTML stripped, cut to 24 characters) and description.
    service : CategoryService
        Category service dependency.

    Returns
    -------
    Category
        The stored category with its slug.
    """
    return await service.create(category.title, category.description)


@categories_router.put(
    "/{category_id}",
    response_class=ORJSONResponse,
    response_model=Category,
    summary="Update a category",
    responses={409: DUPLICATE_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="categories_update",
)
@limiter.limit(WRITE_LIMIT)
async def update_category(
    request: Request,
    category_id: int,
    category: CategoryUpdate,
    service: CategoryServiceDep,
) -> Category:
    return await service.update(Category(**category.model_dump(), id=category_id))


@categories_router.put(
    "/{category_id}/default",
    status_code=HTTP_204_NO_CONTENT,
    summary="Make a category the default",
    operation_id="categories_set_default",
)
async def set_default_category(category_id: int, service: CategoryServiceDep) -> Response:
    await service.set_default(category_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@categories_router.delete(
    "/{category_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete a category",
    responses={
        409: {
            "description": "Default category",
            "content": {
                "application/json": {"example": {"detail": "Default category cannot be deleted."}},
            },
        },
    },
    operation_id="categories_delete",
)
@limiter.limit(WRITE_LIMIT)
async def delete_category(request: Request, category_id: int, service: CategoryServiceDep) -> Response:
    """Delete a category; its posts move to the default category."""
    await service.delete(category_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@tags_router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[Tag],
    summary="List tags",
    operation_id="tags_list",
)
async def list_tags(service: TagServiceDep) -> list[Tag]:
    return await service.get_all()


@tags_router.get(
    "/by-id/{tag_id}",
    response_class=ORJSONResponse,
    response_model=Tag,
    summary="Get a tag by id",
    operation_id="tags_get",
)
async def get_tag(tag_id: int, service: TagServiceDep) -> Tag:
    return await service.get(tag_id)


@tags_router.get(
    "/{slug}",
    response_class=ORJSONResponse,
    response_model=Tag,
    summary="Get a tag by slug",
    operation_id="tags_get_by_slug",
)
async def get_tag_by_slug(slug: str, service: TagServiceDep) -> Tag:
    return await service.get_by_slug(slug)


@tags_router.post(
    "",
    response_class=ORJSONResponse,
    response_model=Tag,
    status_code=HTTP_201_CREATED,
    summary="Create a tag",
    responses={409: DUPLICATE_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="tags_create",
)
@limiter.limit(WRITE_LIMIT)
async def create_tag(request: Request, tag: TagCreate, service: TagServiceDep) -> Tag:
    return await service.create(Tag(**tag.model_dump()))


@tags_router.put(
    "/{tag_id}",
    response_class=ORJSONResponse,
    response_model=Tag,
    summary="Update a tag",
    responses={409: DUPLICATE_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="tags_update",
)
@limiter.limit(WRITE_LIMIT)
async def update_tag(request: Request, tag_id: int, tag: TagUpdate, service: TagServiceDep) -> Tag:
    return await service.update(Tag(**tag.model_dump(), id=tag_id))


@tags_router.delete(
    "/{tag_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete a tag",
    operation_id="tags_delete",
)
@limiter.limit(WRITE_LIMIT)
async def delete_tag(request: Request, tag_id: int, service: TagServiceDep) -> Response:
    await service.delete(tag_id)
    return Response(status_code=HTTP_204_NO_CONTENT)
