from fanblog.routes.health import router as health_router
from fanblog.routes.media import router as media_router
from fanblog.routes.pages import router as pages_router
from fanblog.routes.posts import router as posts_router
from fanblog.routes.taxonomy import categories_router, tags_router

__all__ = [
    "categories_router",
    "health_router",
    "media_router",
    "pages_router",
    "posts_router",
    "tags_router",
]
