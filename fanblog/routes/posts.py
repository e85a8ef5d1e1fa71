"""
Blog post routes.

Summary
-------
Admin endpoints create, update and delete posts and list drafts; public
endpoints read published posts by permalink, category, tag or month.

Rate Limiting
-------------
Writes are limited per client IP address.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Query, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from fanblog.dependencies import BlogPostServiceDep
from fanblog.managers import limiter
from fanblog.schemas import ArchiveItem, BlogPost, BlogPostIn, BlogPostList

router = APIRouter(prefix="/posts", tags=["📝 Posts"])

RATE_LIMIT_RESPONSE = {
    "description": "Rate limit exceeded",
    "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
}
NOT_FOUND_RESPONSE = {
    "description": "Not found",
    "content": {"application/json": {"example": {"detail": "Blog post with id 1 is not found."}}},
}
VALIDATION_RESPONSE = {
    "description": "Invalid post",
    "content": {
        "application/json": {
            "example": {
                "detail": "'Title' must not be empty.",
                "errors": ["'Title' must not be empty."],
            },
        },
    },
}


WRITE_LIMIT = "10/minute"


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=BlogPost,
    status_code=HTTP_201_CREATED,
    summary="Create a blog post",
    responses={400: VALIDATION_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="posts_create",
)
@limiter.limit(WRITE_LIMIT)
async def create_post(
    request: Request,
    post: Annotated[
        BlogPostIn,
        Body(
            examples=[
                {
                    "title": "Hello World",
                    "body": "<p>First post</p>",
                    "status": "published",
                    "category_title": "Technology",
                    "tag_titles": ["python", "fastapi"],
                },
            ],
        ),
    ],
    service: BlogPostServiceDep,
) -> BlogPost:
    """
    Create a blog post.

    Parameters
    ----------
    request : Request
        Current request context.
    post : BlogPostIn
        Post payload. A category or tags named by title are created when
        missing.
    service : BlogPostService
        Blog post service dependency.

    Returns
    -------
    BlogPost
        The stored post with its resolved slug, category and tags.

    Raises
    ------
    ValidationError
        If a published post has no title or the title is too long.
    """
    return await service.create(BlogPost(**post.model_dump()))


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=BlogPost,
    summary="Update a blog post",
    responses={400: VALIDATION_RESPONSE, 404: NOT_FOUND_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="posts_update",
)
@limiter.limit(WRITE_LIMIT)
async def update_post(
    request: Request,
    post_id: int,
    post: BlogPostIn,
    service: BlogPostServiceDep,
) -> BlogPost:
    """
    Update a blog post.

    Parameters
    ----------
    request : Request
        Current request context.
    post_id : int
        Post identifier.
    post : BlogPostIn
        New post content.
    service : BlogPostService
        Blog post service dependency.

    Returns
    -------
    BlogPost
        The updated post.
    """
    return await service.update(BlogPost(**post.model_dump(), id=post_id))


@router.delete(
    "/cache",
    status_code=HTTP_204_NO_CONTENT,
    summary="Clear the blog cache",
    operation_id="posts_clear_cache",
)
async def clear_blog_cache(service: BlogPostServiceDep) -> Response:
    await service.remove_blog_cache()
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.delete(
    "/{post_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete a blog post",
    responses={404: NOT_FOUND_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="posts_delete",
)
@limiter.limit(WRITE_LIMIT)
async def delete_post(request: Request, post_id: int, service: BlogPostServiceDep) -> Response:
    """Delete a blog post and drop every cache entry it appears in."""
    await service.delete(post_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=BlogPostList,
    summary="List published posts",
    operation_id="posts_list",
)
async def list_posts(
    service: BlogPostServiceDep,
    page: Annotated[int, Query(description="1-based page number")] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 10,
) -> BlogPostList:
    """
    List published posts, newest first.

    Parameters
    ----------
    service : BlogPostService
        Blog post service dependency.
    page : int
        Page number; values below 1 read the first page.
    page_size : int
        Posts per page.

    Returns
    -------
    BlogPostList
        One page of posts and the total number of published posts.
    """
    return await service.get_list(page, page_size)


@router.get(
    "/drafts",
    response_class=ORJSONResponse,
    response_model=BlogPostList,
    summary="List drafts",
    operation_id="posts_drafts",
)
async def list_drafts(service: BlogPostServiceDep) -> BlogPostList:
    return await service.get_list_for_drafts()


@router.get(
    "/recent",
    response_class=ORJSONResponse,
    response_model=BlogPostList,
    summary="List the latest posts",
    operation_id="posts_recent",
)
async def list_recent_posts(
    service: BlogPostServiceDep,
    count: Annotated[int, Query(ge=1, le=50)] = 5,
    published: bool = True,
) -> BlogPostList:
    """Latest published posts, or the latest posts of any status with ``published=false``."""
    if published:
        return await service.get_recent_published_posts(count)
    return await service.get_recent_posts(count)


@router.get(
    "/archives",
    response_class=ORJSONResponse,
    response_model=list[ArchiveItem],
    summary="Published post counts per month",
    operation_id="posts_archives",
)
async def list_archives(service: BlogPostServiceDep) -> list[ArchiveItem]:
    return await service.get_archives()


@router.get(
    "/count",
    response_class=ORJSONResponse,
    response_model=dict[str, int],
    summary="Number of published posts",
    operation_id="posts_count",
)
async def post_count(service: BlogPostServiceDep) -> dict[str, int]:
    return {"count": await service.get_post_count()}


@router.get(
    "/archive/{year}",
    response_class=ORJSONResponse,
    response_model=BlogPostList,
    summary="Published posts of a year or month",
    operation_id="posts_archive",
)
async def list_archive(
    year: int,
    service: BlogPostServiceDep,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
) -> BlogPostList:
    return await service.get_list_for_archive(year, month)


@router.get(
    "/category/{slug}",
    response_class=ORJSONResponse,
    response_model=BlogPostList,
    summary="Published posts in a category",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="posts_by_category",
)
async def list_category_posts(slug: str, service: BlogPostServiceDep, page: int = 1) -> BlogPostList:
    return await service.get_list_for_category(slug, page)


@router.get(
    "/tag/{slug}",
    response_class=ORJSONResponse,
    response_model=BlogPostList,
    summary="Published posts with a tag",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="posts_by_tag",
)
async def list_tag_posts(slug: str, service: BlogPostServiceDep, page: int = 1) -> BlogPostList:
    return await service.get_list_for_tag(slug, page)


@router.get(
    "/by-id/{post_id}",
    response_class=ORJSONResponse,
    response_model=BlogPost,
    summary="Get a blog post by id",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="posts_get_by_id",
)
async def get_post(post_id: int, service: BlogPostServiceDep) -> BlogPost:
    return await service.get(post_id)


@router.get(
    "/{year}/{month}/{day}/{slug}",
    response_class=ORJSONResponse,
    response_model=BlogPost,
    summary="Get a blog post by permalink",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="posts_get_by_slug",
)
async def get_post_by_slug(
    year: int,
    month: int,
    day: int,
    slug: str,
    service: BlogPostServiceDep,
) -> BlogPost:
    """
    Get a blog post by its permalink.

    Parameters
    ----------
    year, month, day : int
        Date the post was created on.
    slug : str
        Post slug.
    service : BlogPostService
        Blog post service dependency.

    Returns
    -------
    BlogPost
        The post, with responsive ``<img>`` markup in its body.

    Examples
    --------
    Request
        GET /posts/2024/5/1/hello-world
    """
    return await service.get_by_slug(slug, year, month, day)
