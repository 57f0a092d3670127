"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        """Test that health endpoint returns 200 OK."""
        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health_returns_correct_structure(self, client: AsyncClient) -> None:
        """Test that health endpoint returns expected structure."""
        data = (await client.get("/health")).json()

        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data
        assert "environment" in data

    @pytest.mark.asyncio
    async def test_health_sets_security_headers(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert "x-request-id" in response.headers


class TestDetailedHealthEndpoint:
    """Tests for the readiness check."""

    @pytest.mark.asyncio
    async def test_reports_database_and_identity_provider(self, client: AsyncClient) -> None:
        response = await client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["database"] == "healthy"
        assert data["identity_provider"] == "configured"
        assert data["status"] == "healthy"
