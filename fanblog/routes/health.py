"""Health check route."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fanblog.dependencies import SessionDep, get_cache_manager
from fanblog.managers import limiter
from fanblog.monitoring import get_logger
from fanblog.schemas import CacheHealthResponse, HealthCheckResponse

logger = get_logger(__name__)

router = APIRouter(tags=["🩺 Health"])


@router.get(
    "/health",
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2025-01-01",
                        "database": "ok",
                        "cache": {"backend": "memory", "status": "healthy", "statistics": {}},
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request, session: SessionDep) -> HealthCheckResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.
    session : AsyncSession
        Database session used for a ``SELECT 1`` check.

    Returns
    -------
    HealthCheckResponse
        Overall status with database and cache details. The status is
        ``degraded`` when the database cannot be reached.
    """
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        database = "unavailable"

    cache = CacheHealthResponse(**await get_cache_manager(request).health_check())

    return HealthCheckResponse(
        version=request.app.version,
        status="ok" if database == "ok" else "degraded",
        timestamp=datetime.now(UTC).date().isoformat(),
        database=database,
        cache=cache,
    )
