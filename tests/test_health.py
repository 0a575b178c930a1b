"""Tests for health and root endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from app.config import settings


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == settings.app_name


@pytest.mark.asyncio
async def test_ping(client: AsyncClient):
    response = await client.get("/api/ping")

    assert response.json() == {"message": "pong"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "db_ok,redis_ok,expected,code",
    [
        (True, True, "healthy", 200),
        (True, False, "degraded", 200),
        (False, True, "unhealthy", 503),
    ],
)
async def test_detailed_health(
    client: AsyncClient, db_ok: bool, redis_ok: bool, expected: str, code: int
):
    with (
        patch(
            "app.api.v1.endpoints.health.check_database_connection",
            AsyncMock(return_value=db_ok),
        ),
        patch(
            "app.api.v1.endpoints.health.check_redis_connection",
            AsyncMock(return_value=redis_ok),
        ),
    ):
        response = await client.get("/api/health/detailed")

    assert response.status_code == code
    assert response.json()["status"] == expected
    assert response.json()["database"] == ("healthy" if db_ok else "unhealthy")


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")

    assert response.json()["api"] == settings.api_prefix
