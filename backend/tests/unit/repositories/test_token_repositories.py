"""Tests for the refresh, verification and reset token repositories."""

from __future__ import annotations

from datetime import timedelta

from pos_backoffice.models.base import utcnow
from pos_backoffice.repositories import (
    EmailVerificationRepository,
    PasswordResetRepository,
    RefreshTokenRepository,
)
from tests.factories.user import UserFactory


def test_claim_flips_an_active_token_once(session):
    user = UserFactory()
    repo = RefreshTokenRepository(session=session)
    row = repo.create(user.id, "a" * 64, utcnow() + timedelta(days=1))

    assert repo.claim(row.id) is True
    assert row.revoked is True
    assert row.revoked_at is not None
    assert repo.claim(row.id) is False


def test_get_by_hash_matches_exact_digest(session):
    user = UserFactory()
    repo = RefreshTokenRepository(session=session)
    row = repo.create(user.id, "b" * 64, utcnow() + timedelta(days=1))

    assert repo.get_by_hash("b" * 64) is row
    assert repo.get_by_hash("B" * 64) is None


def test_revoke_all_for_user_leaves_others(session):
    alice, bob = UserFactory(), UserFactory()
    repo = RefreshTokenRepository(session=session)
    later = utcnow() + timedelta(days=1)
    repo.create(alice.id, "1" * 64, later)
    repo.create(alice.id, "2" * 64, later)
    bobs = repo.create(bob.id, "3" * 64, later)

    assert repo.revoke_all_for_user(alice.id) == 2
    session.refresh(bobs)
    assert bobs.revoked is False


def test_single_use_tokens_are_marked_used(session):
    user = UserFactory()
    for repo_cls in (EmailVerificationRepository, PasswordResetRepository):
        repo = repo_cls(session=session)
        row = repo.create(user.id, "c" * 64, utcnow() + timedelta(hours=1))
        assert row.is_used is False

        repo.mark_used(row)

        assert repo.get_by_hash("c" * 64).is_used is True
