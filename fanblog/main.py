"""fanblog backend: blog posts, pages, taxonomy and media over FastAPI."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from fanblog.configs import settings
from fanblog.errors import (
    BlogError,
    CacheExceptionError,
    DatabaseError,
    UploadError,
    blog_exception_handler,
    cache_exception_handler,
    database_exception_handler,
    request_validation_exception_handler,
    upload_exception_handler,
)
from fanblog.managers import limiter, rate_limit_exceeded_handler
from fanblog.middleware import LoggingMiddleware, SecurityHeadersMiddleware, configure_cors, lifespan
from fanblog.routes import (
    categories_router,
    health_router,
    media_router,
    pages_router,
    posts_router,
    tags_router,
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="fanblog",
        description="Blog and CMS backend API",
        version="1.0.0",
        lifespan=lifespan,
        swagger_ui_parameters={"docExpansion": "none", "operationsSorter": "method"},
    )

    configure_cors(app)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    routes = [
        health_router,
        posts_router,
        pages_router,
        categories_router,
        tags_router,
        media_router,
    ]
    for router in routes:
        app.include_router(router)

    errors = [
        (BlogError, blog_exception_handler),
        (CacheExceptionError, cache_exception_handler),
        (DatabaseError, database_exception_handler),
        (UploadError, upload_exception_handler),
        (RateLimitExceeded, rate_limit_exceeded_handler),
        (RequestValidationError, request_validation_exception_handler),
    ]
    for exc_type, handler in errors:
        app.add_exception_handler(exc_type, handler)

    app.state.limiter = limiter

    media_root = settings.UPLOADS_DIR / settings.MEDIA_CONTAINER_NAME
    media_root.mkdir(parents=True, exist_ok=True)
    app.mount(f"/{settings.MEDIA_CONTAINER_NAME}", StaticFiles(directory=media_root), name="media")

    return app


app = create_app()
