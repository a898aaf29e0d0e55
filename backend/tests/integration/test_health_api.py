"""Health endpoint and generic routing errors."""

from __future__ import annotations

from tests.helpers.api import API
from tests.helpers.assertions import assert_error


def test_health_reports_database(client):
    resp = client.get(f"{API}/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert "version" in body


def test_unknown_route_uses_error_shape(client):
    resp = client.get(f"{API}/nope")

    body = assert_error(resp, 404, "not_found", "route '/api/v1/nope' not found")
    assert resp.mimetype == "application/problem+json"
    assert body["instance"] == "/api/v1/nope"


def test_request_id_is_echoed(client):
    resp = client.get(f"{API}/nope", headers={"X-Request-ID": "req-123"})

    assert resp.get_json()["request_id"] == "req-123"
