"""Tests for the health endpoint."""

from unittest.mock import AsyncMock, patch

import pytest

pytestmark = pytest.mark.asyncio


class TestHealth:
    """Tests for GET /health."""

    async def test_healthy_without_authentication(self, async_client):
        with patch("app.api.health.check_db_connection", AsyncMock(return_value=True)):
            response = await async_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert "version" in data

    async def test_database_down_returns_503(self, async_client):
        with patch("app.api.health.check_db_connection", AsyncMock(return_value=False)):
            response = await async_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
