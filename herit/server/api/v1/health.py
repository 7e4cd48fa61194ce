"""
Health Check Endpoints.

This module provides system status endpoints (health, version) used for
monitoring and deployment verification.

The health check reports database connectivity, whether the session secret
is configured, and which OAuth providers are available:
- ``healthy``: everything is operational
- ``degraded``: the database or the authentication configuration has a problem (200)
- ``unhealthy``: both have problems (503)
"""

import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from herit.core.logging_config import get_logger
from herit.server.core import constant
from herit.server.core.config import MIN_SECRET_LENGTH, settings
from herit.server.services.deps import SessionDep

logger = get_logger(__name__)

router = APIRouter()

_started_at = time.monotonic()


class DatabaseHealth(BaseModel):
    status: str = "disconnected"
    latency_ms: Optional[float] = None
    error: Optional[str] = None


class AuthenticationHealth(BaseModel):
    status: str = "operational"
    has_secrets: bool = False


class OAuthHealth(BaseModel):
    google: bool = False


class ServicesHealth(BaseModel):
    database: DatabaseHealth
    authentication: AuthenticationHealth
    oauth: OAuthHealth


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    environment: str
    services: ServicesHealth
    uptime: float


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check the operational status of the API server and its dependencies.",
    response_description="Health status object.",
    responses={
        200: {"description": "Server is healthy or degraded"},
        503: {"description": "Server is unhealthy"},
    },
)
async def health_check(session: SessionDep, response: Response) -> HealthResponse:
    """
    Health check endpoint.

    Runs ``SELECT 1`` against the database and inspects the authentication
    and OAuth configuration.
    """
    started = time.perf_counter()
    overall = "healthy"

    database = DatabaseHealth()
    try:
        db_started = time.perf_counter()
        await session.execute(text("SELECT 1"))
        database = DatabaseHealth(status="connected", latency_ms=round((time.perf_counter() - db_started) * 1000, 2))
    except SQLAlchemyError as e:
        overall = "degraded"
        database = DatabaseHealth(status="error", error=str(e))
        logger.error(f"Health check: database connection failed: {e}")

    has_secrets = len(settings.auth.session_secret or "") >= MIN_SECRET_LENGTH
    authentication = AuthenticationHealth(status="operational" if has_secrets else "error", has_secrets=has_secrets)
    if not has_secrets:
        overall = "degraded"

    if database.status == "error" and authentication.status == "error":
        overall = "unhealthy"

    logger.info(
        f"Health check completed: status={overall} database={database.status} "
        f"duration={(time.perf_counter() - started) * 1000:.2f}ms"
    )

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE if overall == "unhealthy" else status.HTTP_200_OK
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["X-Health-Status"] = overall
    return HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc),
        version=constant.VERSION,
        environment=settings.environment,
        services=ServicesHealth(
            database=database,
            authentication=authentication,
            oauth=OAuthHealth(google=settings.google.is_configured),
        ),
        uptime=round(time.monotonic() - _started_at, 3),
    )


@router.head("/health", summary="Health Check (HEAD)", description="Lightweight liveness check without a body.")
async def health_head() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    """
    Get API version.

    Returns the current semantic version of the API and the environment it runs in.
    """
    return {"version": constant.VERSION, "environment": settings.environment}
