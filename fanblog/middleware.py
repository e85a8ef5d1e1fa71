"""
Middleware components and the lifespan handler.

The lifespan configures logging, prepares the database and starts the cache
manager; the middlewares log each request under a request id and add
security headers.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from fanblog.configs import settings
from fanblog.db import close_db, init_db
from fanblog.errors import host
from fanblog.managers import CacheManager
from fanblog.monitoring import bind_request_id, clear_context, configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown."""
    configure_logging()
    logger.info("Starting application", app=app.title, environment=settings.ENVIRONMENT)

    try:
        await init_db()
        cache_manager = CacheManager()
        await cache_manager.initialize()
        app.state.cache_manager = cache_manager
    except Exception:
        logger.exception("Failed to initialize services")
        raise

    logger.info("Services initialized", cache_backend=cache_manager.backend)

    yield

    logger.info("Shutting down application", app=app.title)
    try:
        await cache_manager.shutdown()
        await close_db()
    except Exception:
        logger.exception("Error during service cleanup")


def configure_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing information under a request id."""
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        bind_request_id(request_id)
        start_time = perf_counter()
        logger.info("Request", method=request.method, path=request.url.path, ip=host(request))

        try:
            response = await call_next(request)
            logger.info(
                "Response",
                status_code=response.status_code,
                method=request.method,
                path=request.url.path,
                duration_ms=round((perf_counter() - start_time) * 1000, 2),
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
