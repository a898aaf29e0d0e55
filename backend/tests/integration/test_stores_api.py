"""Store endpoints and store scoping over HTTP."""

from __future__ import annotations

import pytest

from tests.factories.tenant import StoreFactory
from tests.helpers.api import API
from tests.helpers.assertions import assert_error
from tests.helpers.auth import bearer, issue_token
from tests.helpers.builders import add_member, add_role, build_tenant


@pytest.fixture()
def airport(world):
    return StoreFactory(tenant_id=world.tenant.id, name="Airport")


def test_admin_sees_every_store(client, admin_headers, airport):
    resp = client.get(f"{API}/stores", headers=admin_headers)

    assert [s["name"] for s in resp.get_json()] == ["Airport", "Main Store"]


def test_member_is_limited_to_assigned_stores(client, world, airport):
    member = add_member(world, role=add_role(world, name="Cashier"), stores=[airport])
    headers = bearer(issue_token(member))

    listed = client.get(f"{API}/stores", headers=headers)
    own = client.get(f"{API}/stores/{airport.id}", headers=headers)
    other = client.get(f"{API}/stores/{world.store.id}", headers=headers)

    assert [s["name"] for s in listed.get_json()] == ["Airport"]
    assert own.status_code == 200
    assert_error(other, 403, "forbidden", "no access to this store")


def test_foreign_store_is_not_found(client, session, admin_headers):
    other = build_tenant(session)

    resp = client.get(f"{API}/stores/{other.store.id}", headers=admin_headers)

    assert_error(resp, 404, "not_found", "store not found")


def test_create_and_update_store(client, admin_headers):
    created = client.post(
        f"{API}/stores", json={"name": "Harbour", "phone": "555-0100"}, headers=admin_headers
    )
    assert created.status_code == 201
    store = created.get_json()
    assert (store["name"], store["phone"], store["is_active"]) == ("Harbour", "555-0100", True)

    updated = client.put(
        f"{API}/stores/{store['id']}",
        json={"name": "Harbour Front", "is_active": False},
        headers=admin_headers,
    )
    assert updated.get_json()["name"] == "Harbour Front"
    assert updated.get_json()["is_active"] is False


def test_store_name_conflict(client, admin_headers):
    resp = client.post(f"{API}/stores", json={"name": "Main Store"}, headers=admin_headers)

    assert_error(resp, 409, "conflict", "a store with this name already exists in your tenant")


def test_store_writes_need_admin(client, world):
    member = add_member(world, stores=[world.store])
    headers = bearer(issue_token(member))

    created = client.post(f"{API}/stores", json={"name": "Sneaky"}, headers=headers)
    updated = client.put(f"{API}/stores/{world.store.id}", json={"name": "Mine"}, headers=headers)

    assert_error(created, 403, "forbidden", "insufficient permissions")
    assert_error(updated, 403, "forbidden", "insufficient permissions")


def test_store_update_requires_name(client, world, admin_headers):
    resp = client.put(f"{API}/stores/{world.store.id}", json={"phone": "1"}, headers=admin_headers)

    body = assert_error(resp, 422, "validation_error")
    assert "name" in body["details"]


def test_deactivate_store(client, admin_headers, airport):
    resp = client.delete(f"{API}/stores/{airport.id}", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.get_json() == {"message": "store deactivated"}
    detail = client.get(f"{API}/stores/{airport.id}", headers=admin_headers).get_json()
    assert detail["is_active"] is False


def test_deactivate_foreign_store_is_not_found(client, session, admin_headers):
    other = build_tenant(session)

    resp = client.delete(f"{API}/stores/{other.store.id}", headers=admin_headers)

    assert_error(resp, 404, "not_found", "store not found")


def test_store_deactivation_needs_admin(client, world):
    member = add_member(world, stores=[world.store])

    resp = client.delete(f"{API}/stores/{world.store.id}", headers=bearer(issue_token(member)))

    assert_error(resp, 403, "forbidden", "insufficient permissions")
