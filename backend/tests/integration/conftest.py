"""Fixtures shared by the HTTP-level tests."""

from __future__ import annotations

import pytest

from tests.helpers.api import register_tenant
from tests.helpers.auth import bearer, issue_token
from tests.helpers.builders import build_tenant


@pytest.fixture(autouse=True)
def _catalog(features):
    """Every API test runs against the seeded feature catalog."""


@pytest.fixture()
def owner(client):
    """Register a tenant through the API and return its ``{user, tokens}`` body."""
    return register_tenant(client)


@pytest.fixture()
def owner_headers(owner) -> dict[str, str]:
    return bearer(owner["tokens"]["access_token"])


@pytest.fixture()
def world(session):
    """Factory-built tenant with an administrator (see ``build_tenant``)."""
    return build_tenant(session)


@pytest.fixture()
def admin_headers(world) -> dict[str, str]:
    return bearer(issue_token(world.admin))
