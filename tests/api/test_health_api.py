"""Tests for health and root endpoints."""

from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

import lotledger.infrastructure.storage.sqlite as sqlite_module


async def test_root(client: AsyncClient):
    response = await client.get("/")

    assert response.status_code == 200
    assert "version" in response.json()


async def test_health(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["uptime_seconds"] >= 0


async def test_db_health(client: AsyncClient):
    pool = AsyncMock()
    pool.ping.return_value = True

    with patch.object(sqlite_module, "get_pool", AsyncMock(return_value=pool)):
        response = await client.get("/api/health/db")

    assert response.status_code == 200
    assert response.json()["database"]["available"] is True


async def test_db_unavailable(client: AsyncClient):
    with patch.object(sqlite_module, "get_pool", AsyncMock(side_effect=OSError("disk gone"))):
        response = await client.get("/api/health/db")

    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"]["error"] == "disk gone"
