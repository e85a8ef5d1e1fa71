"""
Page routes.

Admin endpoints manage parent and child pages and their navigation
Markdown. Published pages are read at ``/pages/view/{parent}`` and
``/pages/view/{parent}/{child}``.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from fanblog.dependencies import PageServiceDep
from fanblog.managers import limiter
from fanblog.routes.posts import NOT_FOUND_RESPONSE, RATE_LIMIT_RESPONSE, WRITE_LIMIT
from fanblog.schemas import Page, PageIn, PageNavIn
from fanblog.services.page import nav_md_to_html

router = APIRouter(prefix="/pages", tags=["📄 Pages"])

DUPLICATE_RESPONSE = {
    "description": "Title or slug taken",
    "content": {
        "application/json": {
            "example": {"detail": "A page with same title exists, please choose a different one."},
        },
    },
}


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=Page,
    status_code=HTTP_201_CREATED,
    summary="Create a page",
    responses={409: DUPLICATE_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="pages_create",
)
@limiter.limit(WRITE_LIMIT)
async def create_page(
    request: Request,
    page: Annotated[
        PageIn,
        Body(
            examples=[
                {
                    "title": "About",
                    "body": "<p>Meet the [[Team]]</p>",
                    "body_mark": "Meet the [[Team]]",
                    "status": "published",
                },
            ],
        ),
    ],
    service: PageServiceDep,
) -> Page:
    """
    Create a page.

    Parameters
    ----------
    request : Request
        Current request context.
    page : PageIn
        Page payload; set ``parent_id`` to create a child page.
    service : PageService
        Page service dependency.

    Returns
    -------
    Page
        The stored page with its children, or with its parent for a child.

    Raises
    ------
    DuplicateRecordError
        If a sibling has the same title or slug, or a parent slug is reserved.
    """
    return await service.create(Page(**page.model_dump(exclude_none=True)))


@router.put(
    "/{page_id}",
    response_class=ORJSONResponse,
    response_model=Page,
    summary="Update a page",
    responses={404: NOT_FOUND_RESPONSE, 409: DUPLICATE_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="pages_update",
)
@limiter.limit(WRITE_LIMIT)
async def update_page(request: Request, page_id: int, page: PageIn, service: PageServiceDep) -> Page:
    return await service.update(Page(**page.model_dump(exclude_none=True), id=page_id))


@router.delete(
    "/{page_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete a page",
    responses={404: NOT_FOUND_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="pages_delete",
)
@limiter.limit(WRITE_LIMIT)
async def delete_page(request: Request, page_id: int, service: PageServiceDep) -> Response:
    await service.delete(page_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[Page],
    summary="List parent pages",
    operation_id="pages_list",
)
async def list_pages(service: PageServiceDep, with_children: bool = False) -> list[Page]:
    return await service.get_parents(with_children)


@router.get(
    "/by-id/{page_id}",
    response_class=ORJSONResponse,
    response_model=Page,
    summary="Get a page by id",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="pages_get_by_id",
)
async def get_page(page_id: int, service: PageServiceDep) -> Page:
    return await service.get(page_id)


@router.get(
    "/by-id/{page_id}/nav",
    response_class=ORJSONResponse,
    response_model=dict[str, str | None],
    summary="Get a page's navigation",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="pages_get_nav",
)
async def get_page_nav(page_id: int, service: PageServiceDep) -> dict[str, str | None]:
    """
    Navigation Markdown of a page and its rendered HTML.

    ``[[Title]]`` links resolve against the page's parent, or the page
    itself when it is a parent.
    """
    page = await service.get(page_id)
    parent_slug = page.parent.slug if page.parent else page.slug
    return {"nav_md": page.nav, "nav_html": nav_md_to_html(page.nav, parent_slug)}


@router.put(
    "/by-id/{page_id}/nav",
    status_code=HTTP_204_NO_CONTENT,
    summary="Save a page's navigation",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="pages_save_nav",
)
async def save_page_nav(page_id: int, nav: PageNavIn, service: PageServiceDep) -> Response:
    await service.save_nav(page_id, nav.nav_md)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get(
    "/view/{parent_slug}",
    response_class=ORJSONResponse,
    response_model=Page,
    summary="Get a published parent page",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="pages_view_parent",
)
async def view_parent_page(parent_slug: str, service: PageServiceDep) -> Page:
    return await service.get_by_slugs(parent_slug)


@router.get(
    "/view/{parent_slug}/{child_slug}",
    response_class=ORJSONResponse,
    response_model=Page,
    summary="Get a published child page",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="pages_view_child",
)
async def view_child_page(parent_slug: str, child_slug: str, service: PageServiceDep) -> Page:
    """
    Get a published child page with its parent.

    Examples
    --------
    Request
        GET /pages/view/about/team
    """
    return await service.get_by_slugs(parent_slug, child_slug)
