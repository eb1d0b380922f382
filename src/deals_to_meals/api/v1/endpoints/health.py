"""Health check endpoints.

Provides liveness and readiness probes for the platform's load balancer.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from deals_to_meals.cache.redis import check_redis_health
from deals_to_meals.core.config import CredentialBackend, Settings, get_settings
from deals_to_meals.database import check_database_health


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Health status", examples=["healthy"])
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Current server timestamp",
    )
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")


class ReadinessResponse(HealthResponse):
    """Readiness check response with dependency status."""

    dependencies: dict[str, str] = Field(
        default_factory=dict,
        description="Status of backing services",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Basic health check to verify the service is running.",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Check if the service is alive. External dependencies are not checked."""
    return HealthResponse(
        status="healthy",
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Readiness check verifying backing services are available.",
)
async def readiness_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ReadinessResponse:
    """Check the database and, when configured, Redis."""
    dependencies: dict[str, str] = {}

    if settings.database.enabled:
        dependencies.update(await check_database_health())
    else:
        dependencies["database"] = "not_configured"

    if settings.credential_backend_enum == CredentialBackend.REDIS:
        dependencies.update(await check_redis_health())
    else:
        dependencies["redis"] = "not_configured"

    all_healthy = all(
        status in ("healthy", "not_configured") for status in dependencies.values()
    )

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        version=settings.app.version,
        environment=settings.APP_ENV,
        dependencies=dependencies,
    )
