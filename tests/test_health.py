"""
tests/test_health.py -- Integration tests for GET /health.

Covers:
  - 200 response with status, version, and components fields
  - No authentication required
  - Components report store and admin state, never the admin token
"""

from __future__ import annotations


def test_health_returns_200_with_components(api_client):
    """Health endpoint returns 200 with status, version, and components."""
    client, _admin, _store = api_client
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert data["components"] == {"app": "ok", "store": "ok", "admin": "configured"}


def test_health_no_auth_required(api_client):
    """Health endpoint is accessible without any authentication headers."""
    client, _admin, _store = api_client
    resp = client.get("/health", headers={})
    assert resp.status_code == 200


def test_health_does_not_leak_admin_token(api_client):
    client, admin, _store = api_client
    admin_token = admin["Authorization"].removeprefix("Bearer ")
    assert admin_token not in client.get("/health").text
