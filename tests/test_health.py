"""Tests for health and info endpoints."""

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient):
    """Test that health endpoint returns ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_endpoint(client: TestClient):
    """Test that root endpoint returns server info."""
    response = client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert "name" in data
    assert "version" in data
    assert data["endpoints"]["health"] == "/health"
    assert data["endpoints"]["mcp"] == "/mcp"
    assert data["tools_available"] == 5


def test_root_endpoint_has_mcp_version(client: TestClient):
    """Test that root endpoint includes MCP protocol version."""
    data = client.get("/").json()
    assert data["mcp_protocol_version"] == "2025-06-18"


def test_request_id_is_echoed(client: TestClient):
    """Test that a supplied X-Request-ID comes back on the response."""
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
