"""Tests for the health endpoint."""

from unittest.mock import AsyncMock, patch

import pytest


@pytest.mark.asyncio
async def test_health_check(async_client):
    with patch("app.api.health.check_db_connection", AsyncMock(return_value=True)):
        response = await async_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert data["ai"] == "configured"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_check_database_down(async_client):
    with patch("app.api.health.check_db_connection", AsyncMock(return_value=False)):
        response = await async_client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


@pytest.mark.asyncio
async def test_docs_hidden_without_debug(async_client):
    response = await async_client.get("/docs")
    assert response.status_code == 404
