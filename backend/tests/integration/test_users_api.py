"""User administration over HTTP."""

from __future__ import annotations

from tests.factories.tenant import StoreFactory
from tests.helpers.api import API, DEFAULT_PASSWORD, login, refresh
from tests.helpers.assertions import assert_error
from tests.helpers.auth import bearer, issue_token
from tests.helpers.builders import add_member, add_role, build_tenant


def test_list_and_detail(client, world, admin_headers):
    cashier = add_role(world, name="Cashier")
    member = add_member(world, role=cashier, stores=[world.store])

    listed = client.get(f"{API}/users", headers=admin_headers).get_json()
    detail = client.get(f"{API}/users/{member.id}", headers=admin_headers).get_json()

    assert {u["id"] for u in listed} == {str(world.admin.id), str(member.id)}
    assert detail["user"]["email"] == member.email
    assert [r["name"] for r in detail["roles"]] == ["Cashier"]
    assert [s["name"] for s in detail["stores"]] == ["Main Store"]


def test_users_of_another_tenant_are_invisible(client, session, admin_headers):
    other = build_tenant(session)

    resp = client.get(f"{API}/users/{other.admin.id}", headers=admin_headers)

    assert_error(resp, 404, "not_found", "user not found")


def test_update_user(client, world, admin_headers):
    member = add_member(world)

    resp = client.put(
        f"{API}/users/{member.id}",
        json={"first_name": "Grace", "last_name": "Hopper"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert (resp.get_json()["first_name"], resp.get_json()["is_active"]) == ("Grace", True)


def test_update_user_stores(client, world, admin_headers):
    airport = StoreFactory(tenant_id=world.tenant.id, name="Airport")
    member = add_member(world, stores=[world.store])

    resp = client.put(
        f"{API}/users/{member.id}/stores",
        json={"store_ids": [str(airport.id)]},
        headers=admin_headers,
    )

    assert [s["name"] for s in resp.get_json()] == ["Airport"]
    me = client.get(f"{API}/me", headers=bearer(issue_token(member))).get_json()
    assert [s["name"] for s in me["stores"]] == ["Airport"]


def test_deactivation_ends_refresh_sessions(client, world, admin_headers, notifier):
    client.post(
        f"{API}/invitations",
        json={"email": "temp@bakery.test", "role_id": str(world.admin_role.id)},
        headers=admin_headers,
    )
    joined = client.post(
        f"{API}/auth/accept-invitation",
        json={
            "token": notifier.last_token("invitation"),
            "password": DEFAULT_PASSWORD,
            "first_name": "Temp",
            "last_name": "Worker",
        },
    ).get_json()
    user_id = joined["user"]["id"]

    resp = client.delete(f"{API}/users/{user_id}", headers=admin_headers)

    assert resp.get_json() == {"message": "user deactivated"}
    assert_error(
        refresh(client, joined["tokens"]["refresh_token"]),
        401,
        "unauthorized",
        "refresh token has been revoked",
    )
    assert_error(login(client, "temp@bakery.test"), 401, "unauthorized", "account is deactivated")
    # Access tokens already issued stay valid until they expire
    stale = bearer(joined["tokens"]["access_token"])
    assert client.get(f"{API}/me", headers=stale).status_code == 200
    detail = client.get(f"{API}/users/{user_id}", headers=admin_headers).get_json()
    assert detail["user"]["is_active"] is False


def test_user_admin_needs_admin(client, world):
    member = add_member(world)

    resp = client.get(f"{API}/users", headers=bearer(issue_token(member)))

    assert_error(resp, 403, "forbidden", "insufficient permissions")
