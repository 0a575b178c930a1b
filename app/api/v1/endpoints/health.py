"""Health check endpoints."""

from typing import Literal

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from app.config import settings
from app.core.redis_client import check_redis_connection
from app.database import check_database_connection

router = APIRouter(tags=["Health"])

ComponentStatus = Literal["healthy", "unhealthy"]
OverallStatus = Literal["healthy", "degraded", "unhealthy"]


class HealthResponse(BaseModel):
    """Liveness: the process is up and serving."""

    status: OverallStatus
    service: str
    version: str
    environment: str


class DetailedHealthResponse(HealthResponse):
    """Readiness, with the state of each backing service."""

    database: ComponentStatus
    redis: ComponentStatus


def _component(ok: bool) -> ComponentStatus:
    return "healthy" if ok else "unhealthy"


def overall_status(db_healthy: bool, redis_healthy: bool) -> OverallStatus:
    """
    Combine component checks.

    Redis only backs the category cache and the token blacklist, both of
    which fail open, so losing it degrades the API instead of breaking it.
    """
    if not db_healthy:
        return "unhealthy"
    if not redis_healthy:
        return "degraded"
    return "healthy"


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Report that the API process is alive."""
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    summary="Detailed health check",
    responses={503: {"model": DetailedHealthResponse}},
)
async def detailed_health_check(response: Response) -> DetailedHealthResponse:
    """
    Check the database and Redis.

    Answers 503 when the database is unreachable so load balancers stop
    routing to this instance; a Redis outage still answers 200.
    """
    db_healthy = await check_database_connection()
    redis_healthy = await check_redis_connection()

    overall = overall_status(db_healthy, redis_healthy)
    if overall == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return DetailedHealthResponse(
        status=overall,
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        database=_component(db_healthy),
        redis=_component(redis_healthy),
    )


@router.get("/ping", summary="Simple ping")
async def ping() -> dict[str, str]:
    return {"message": "pong"}
