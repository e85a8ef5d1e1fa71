"""Health check schemas."""

from pydantic import BaseModel, Field


class CacheHealthResponse(BaseModel):
    backend: str
    status: str
    statistics: dict[str, int | str] = Field(default_factory=dict)


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    version: str = Field(description="API version")
    status: str = Field(description="Overall health status")
    timestamp: str = Field(description="Current UTC date")
    database: str = Field(description="Database reachability")
    cache: CacheHealthResponse | None = None
