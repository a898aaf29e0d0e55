"""End-to-end authentication flows over HTTP."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import select

from pos_backoffice.models import RefreshToken, Role, Store, Tenant
from pos_backoffice.models.base import utcnow
from tests.helpers.api import API, DEFAULT_PASSWORD, login, refresh, register_payload, register_tenant
from tests.helpers.assertions import assert_error, assert_json_keys
from tests.helpers.auth import bearer

OWNER = "owner@bakery.test"


# --------------------------------------------------------------------------- #
# Registration
# --------------------------------------------------------------------------- #


def test_register_creates_tenant_store_and_admin(client, session, notifier):
    body = register_tenant(client, email="Owner@Bakery.TEST")

    assert_json_keys(body, {"user", "tokens"})
    assert_json_keys(body["tokens"], {"access_token", "refresh_token"})
    user = body["user"]
    assert user["email"] == OWNER
    assert user["is_email_verified"] is False
    assert user["is_active"] is True

    tenant = session.execute(select(Tenant)).scalar_one()
    assert (tenant.name, tenant.slug) == ("Corner Bakery", "corner-bakery")
    assert session.execute(select(Store.name)).scalar_one() == "Main Street"
    role = session.execute(select(Role)).scalar_one()
    assert role.is_system_default is True
    assert notifier.last_token("email_verification")


def test_register_then_me_shows_full_access(client, owner, owner_headers):
    resp = client.get(f"{API}/me", headers=owner_headers)

    assert resp.status_code == 200
    me = resp.get_json()
    assert me["user"]["id"] == owner["user"]["id"]
    assert [r["name"] for r in me["roles"]] == ["Administrator"]
    assert me["all_stores_access"] is True
    assert [s["name"] for s in me["stores"]] == ["Main Street"]
    assert me["permissions"]["master-data.product"] == ["create", "delete", "edit", "read"]
    assert me["permissions"]["reporting.sales"] == ["read"]
    assert "master-data" not in me["permissions"]


def test_register_conflicts(client, owner):
    same_tenant = client.post(
        f"{API}/auth/register", json=register_payload(tenant_name="Corner Bakery!", email="b@x.io")
    )
    same_email = client.post(
        f"{API}/auth/register", json=register_payload(tenant_name="Other Bakery")
    )

    assert_error(same_tenant, 409, "conflict", "a tenant with a similar name already exists")
    assert_error(same_email, 409, "conflict", "a user with this email already exists")


def test_register_validation_details(client):
    resp = client.post(
        f"{API}/auth/register",
        json={"email": "not-an-email", "password": "short", "surprise": 1},
    )

    body = assert_error(resp, 422, "validation_error", "validation failed")
    details = body["details"]
    assert {"email", "password", "tenant_name", "first_name", "store_name", "surprise"} <= set(details)


def test_register_rejects_symbol_only_tenant_name(client):
    resp = client.post(f"{API}/auth/register", json=register_payload(tenant_name="!!!"))

    body = assert_error(resp, 422, "validation_error")
    assert "tenant_name" in body["details"]


# --------------------------------------------------------------------------- #
# Login / refresh / logout
# --------------------------------------------------------------------------- #


def test_login_success_and_uniform_failures(client, owner):
    ok = login(client, OWNER.upper())
    wrong = login(client, OWNER, "WrongPass1")
    unknown = login(client, "ghost@bakery.test")

    assert ok.status_code == 200
    assert ok.get_json()["user"]["id"] == owner["user"]["id"]
    assert_error(wrong, 401, "unauthorized", "invalid email or password")
    assert_error(unknown, 401, "unauthorized", "invalid email or password")


def test_refresh_rotates_and_reuse_revokes_every_session(client, owner, session):
    first = owner["tokens"]["refresh_token"]
    other_session = login(client, OWNER).get_json()["tokens"]["refresh_token"]

    rotated = refresh(client, first)
    assert rotated.status_code == 200
    second = rotated.get_json()["refresh_token"]
    assert second != first

    reused = refresh(client, first)
    assert_error(reused, 401, "unauthorized", "refresh token has been revoked")

    # The whole chain is burnt, including the unrelated login session
    assert_error(refresh(client, second), 401, "unauthorized", "refresh token has been revoked")
    assert_error(refresh(client, other_session), 401, "unauthorized")
    active = session.execute(select(RefreshToken).where(RefreshToken.revoked.is_(False))).all()
    assert active == []


def test_refresh_with_unknown_token(client):
    assert_error(refresh(client, "nonsense"), 401, "unauthorized", "invalid refresh token")


def test_logout_revokes_refresh_token(client, owner, owner_headers):
    token = owner["tokens"]["refresh_token"]

    resp = client.post(f"{API}/auth/logout", json={"refresh_token": token}, headers=owner_headers)
    again = client.post(f"{API}/auth/logout", json={"refresh_token": token}, headers=owner_headers)

    assert resp.get_json() == {"message": "logged out successfully"}
    assert again.status_code == 200
    assert_error(refresh(client, token), 401, "unauthorized")


def test_logout_requires_bearer(client, owner):
    resp = client.post(
        f"{API}/auth/logout", json={"refresh_token": owner["tokens"]["refresh_token"]}
    )

    assert_error(resp, 401, "unauthorized", "missing authorization header")


# --------------------------------------------------------------------------- #
# Email verification and passwords
# --------------------------------------------------------------------------- #


def test_verify_email_is_single_use(client, owner, owner_headers, notifier):
    token = notifier.last_token("email_verification")

    first = client.post(f"{API}/auth/verify-email", json={"token": token})
    second = client.post(f"{API}/auth/verify-email", json={"token": token})

    assert first.get_json() == {"message": "email verified successfully"}
    assert_error(second, 401, "unauthorized", "verification token already used")
    me = client.get(f"{API}/me", headers=owner_headers).get_json()
    assert me["user"]["is_email_verified"] is True


def test_forgot_password_does_not_reveal_accounts(client, owner, notifier):
    known = client.post(f"{API}/auth/forgot-password", json={"email": OWNER})
    unknown = client.post(f"{API}/auth/forgot-password", json={"email": "ghost@bakery.test"})

    assert known.status_code == unknown.status_code == 200
    assert known.get_json() == unknown.get_json()
    assert [email for kind, email, _ in notifier.sent if kind == "password_reset"] == [OWNER]


def test_reset_password_revokes_sessions(client, owner, notifier):
    client.post(f"{API}/auth/forgot-password", json={"email": OWNER})
    token = notifier.last_token("password_reset")

    resp = client.post(
        f"{API}/auth/reset-password", json={"token": token, "password": "BrandNew123"}
    )

    assert resp.get_json() == {"message": "password reset successfully"}
    assert_error(refresh(client, owner["tokens"]["refresh_token"]), 401, "unauthorized")
    assert login(client, OWNER, DEFAULT_PASSWORD).status_code == 401
    assert login(client, OWNER, "BrandNew123").status_code == 200
    reused = client.post(
        f"{API}/auth/reset-password", json={"token": token, "password": "Another123"}
    )
    assert_error(reused, 401, "unauthorized", "reset token already used")


def test_reset_link_expires_after_its_ttl(client, owner, notifier, freeze_time):
    client.post(f"{API}/auth/forgot-password", json={"email": OWNER})
    token = notifier.last_token("password_reset")

    with freeze_time(utcnow() + timedelta(hours=1, minutes=1)):
        resp = client.post(
            f"{API}/auth/reset-password", json={"token": token, "password": "TooLate123"}
        )

    assert_error(resp, 401, "unauthorized", "reset token has expired")
    assert login(client, OWNER, DEFAULT_PASSWORD).status_code == 200


def test_change_password(client, owner, owner_headers):
    url = f"{API}/auth/change-password"

    wrong = client.put(
        url, json={"current_password": "nope", "new_password": "Changed123"}, headers=owner_headers
    )
    ok = client.put(
        url,
        json={"current_password": DEFAULT_PASSWORD, "new_password": "Changed123"},
        headers=owner_headers,
    )

    assert_error(wrong, 401, "unauthorized", "current password is incorrect")
    assert ok.get_json() == {"message": "password changed successfully"}
    assert login(client, OWNER, "Changed123").status_code == 200
    # Existing sessions survive a voluntary password change
    assert refresh(client, owner["tokens"]["refresh_token"]).status_code == 200


@pytest.mark.parametrize("path", ["/me", "/features", "/stores"])
def test_authenticated_reads(client, owner_headers, path):
    assert client.get(f"{API}{path}", headers=owner_headers).status_code == 200
