"""
Tests for health check endpoints.
"""
from fastapi.testclient import TestClient


class TestHealth:
    """Tests for health check endpoints."""

    def test_basic_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_readiness_without_api_key(self, client: TestClient):
        response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "not ready"
        assert data["checks"]["config"] is False
        assert data["checks"]["storage"] is True

    def test_root(self, client: TestClient):
        assert client.get("/").json()["status"] == "running"
