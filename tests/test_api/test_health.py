"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.integration
class TestHealth:
    """Tests for /health and /ready."""

    async def test_health_returns_ok(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    async def test_ready_reports_database(self, client: AsyncClient) -> None:
        response = await client.get("/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["services"]["database"]["status"] == "connected"

    async def test_request_id_echoed(self, client: AsyncClient) -> None:
        response = await client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    async def test_request_id_generated(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.headers.get("X-Request-ID")
