from __future__ import annotations

from unittest.mock import patch

from hrdesk.core.exceptions import CorruptDataError


def test_health_returns_status_and_services(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert "version" in data
    assert "data_file" in data["services"]


def test_health_with_initialized_store_is_healthy(client, data_file):
    response = client.get("/api/v1/health")
    data = response.json()
    assert data["status"] == "healthy"
    assert data["services"]["data_file"] == "ok"
    assert data_file.exists()


def test_health_degraded_when_data_file_unreadable(client):
    with patch("hrdesk.api.v1.endpoints.health.document_store.read", side_effect=CorruptDataError("bad")):
        response = client.get("/api/v1/health")

    data = response.json()
    assert data["status"] == "degraded"
    assert data["services"]["data_file"] == "error"


def test_health_not_configured_without_lifespan(data_file):
    from starlette.testclient import TestClient

    from hrdesk.main import app

    response = TestClient(app).get("/api/v1/health")
    data = response.json()
    assert data["status"] == "healthy"
    assert data["services"]["data_file"] == "not_configured"


def test_readiness_probe(client):
    response = client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["ready"] is True


def test_health_protected_requires_auth(client):
    response = client.get("/api/v1/health/protected")
    assert response.status_code == 401


def test_health_protected_with_auth(authenticated_client):
    response = authenticated_client.get("/api/v1/health/protected")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["user"]["id"] == "ACJODO20240001"
