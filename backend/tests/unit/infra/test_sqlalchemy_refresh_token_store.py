"""Tests for the relational refresh-token store."""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from sqlalchemy import select

from pos_backoffice.infra.db.sqlalchemy_refresh_token_store import SQLAlchemyRefreshTokenStore
from pos_backoffice.models import RefreshToken
from pos_backoffice.models.base import utcnow
from pos_backoffice.services._shared.ports import RotationResult
from tests.factories.user import UserFactory


@pytest.fixture()
def store() -> SQLAlchemyRefreshTokenStore:
    return SQLAlchemyRefreshTokenStore()


@pytest.fixture()
def user(session):
    return UserFactory()


def _hash(label: str) -> str:
    return (label * 64)[:64]


def test_register_then_get(store, user):
    expires = utcnow() + timedelta(days=1)
    store.register(user_id=user.id, token_hash=_hash("a"), expires_at=expires)

    view = store.get(_hash("a"))

    assert view is not None
    assert view.user_id == user.id
    assert view.revoked is False
    assert abs((view.expires_at - expires).total_seconds()) < 1
    assert store.get(_hash("z")) is None


def test_rotate_revokes_old_and_registers_new(store, user, session):
    now = utcnow()
    store.register(user_id=user.id, token_hash=_hash("a"), expires_at=now + timedelta(days=1))

    outcome = store.rotate(
        old_hash=_hash("a"), new_hash=_hash("b"), now=now, new_expires_at=now + timedelta(days=1)
    )

    assert outcome.result is RotationResult.OK
    assert outcome.user_id == user.id
    assert store.get(_hash("a")).revoked is True
    assert store.get(_hash("b")).revoked is False


def test_rotating_a_revoked_token_reports_reuse(store, user):
    now = utcnow()
    store.register(user_id=user.id, token_hash=_hash("a"), expires_at=now + timedelta(days=1))
    store.rotate(old_hash=_hash("a"), new_hash=_hash("b"), now=now, new_expires_at=now)

    outcome = store.rotate(old_hash=_hash("a"), new_hash=_hash("c"), now=now, new_expires_at=now)

    assert outcome.result is RotationResult.REVOKED
    assert outcome.user_id == user.id
    assert store.get(_hash("c")) is None


def test_rotate_unknown_and_expired(store, user):
    now = utcnow()
    store.register(user_id=user.id, token_hash=_hash("a"), expires_at=now - timedelta(seconds=1))

    missing = store.rotate(old_hash=_hash("x"), new_hash=_hash("y"), now=now, new_expires_at=now)
    expired = store.rotate(old_hash=_hash("a"), new_hash=_hash("b"), now=now, new_expires_at=now)

    assert missing.result is RotationResult.NOT_FOUND
    assert missing.user_id is None
    assert expired.result is RotationResult.EXPIRED
    # An expired token is refused but left active
    assert store.get(_hash("a")).revoked is False


def test_revoke_is_idempotent(store, user):
    store.register(user_id=user.id, token_hash=_hash("a"), expires_at=utcnow() + timedelta(days=1))

    assert store.revoke(_hash("a")) is True
    assert store.revoke(_hash("a")) is False
    assert store.revoke(_hash("q")) is False


def test_revoke_all_for_user_counts_only_active_tokens(store, user, session):
    other = UserFactory()
    later = utcnow() + timedelta(days=1)
    for label in "abc":
        store.register(user_id=user.id, token_hash=_hash(label), expires_at=later)
    store.register(user_id=other.id, token_hash=_hash("d"), expires_at=later)
    store.revoke(_hash("a"))

    assert store.revoke_all_for_user(user.id) == 2
    assert store.revoke_all_for_user(user.id) == 0
    assert store.revoke_all_for_user(uuid.uuid4()) == 0

    active = session.execute(
        select(RefreshToken.token_hash).where(RefreshToken.revoked.is_(False))
    ).scalars().all()
    assert active == [_hash("d")]
