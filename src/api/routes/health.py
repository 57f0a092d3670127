"""Health check endpoints."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from infrastructure.database.session import get_async_session

logger = structlog.get_logger()

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    identity_provider: str | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Liveness check. Does not touch any dependency."""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=_now(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Readiness check: database connectivity and identity provider configuration.

    The user pool is not called; only its settings are checked, so this
    endpoint stays cheap enough for monitoring dashboards.
    """
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("health_database_unreachable", error=str(e))
        db_status = "unhealthy"

    idp_status = (
        "configured"
        if settings.cognito_user_pool_id and settings.cognito_client_id
        else "not_configured"
    )

    overall_status = (
        "healthy"
        if db_status == "healthy" and idp_status == "configured"
        else "degraded"
    )

    return HealthResponse(
        status=overall_status,
        version=VERSION,
        timestamp=_now(),
        environment=settings.app_env,
        database=db_status,
        identity_provider=idp_status,
    )
