"""HTTP helpers driving the public authentication endpoints."""

from __future__ import annotations

from typing import Any

API = "/api/v1"
DEFAULT_PASSWORD = "SecretPass1"


def register_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "tenant_name": "Corner Bakery",
        "email": "owner@bakery.test",
        "password": DEFAULT_PASSWORD,
        "first_name": "Ada",
        "last_name": "Baker",
        "store_name": "Main Street",
        "store_address": "1 Main Street",
    }
    payload.update(overrides)
    return payload


def register_tenant(client, **overrides: Any) -> dict[str, Any]:
    """Register a tenant and return the ``{user, tokens}`` body."""
    resp = client.post(f"{API}/auth/register", json=register_payload(**overrides))
    assert resp.status_code == 201, resp.get_data(as_text=True)
    return resp.get_json()


def login(client, email: str, password: str = DEFAULT_PASSWORD):
    return client.post(f"{API}/auth/login", json={"email": email, "password": password})


def refresh(client, refresh_token: str):
    return client.post(f"{API}/auth/refresh", json={"refresh_token": refresh_token})
