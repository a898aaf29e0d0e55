"""Repositories for hashed refresh, verification and reset tokens."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Generic, TypeVar, cast

from sqlalchemy import select, update

from pos_backoffice.models.base import utcnow
from pos_backoffice.models.tokens import EmailVerification, PasswordReset, RefreshToken
from pos_backoffice.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence for the refresh-token chain.

    Revocation is done with conditional ``UPDATE`` statements whose row count
    tells the caller whether it won the race for a token.
    """

    model = RefreshToken

    def get_by_hash(self, token_hash: str, *, for_update: bool = False) -> RefreshToken | None:
        """Fetch a refresh token row by the SHA-256 digest of its plaintext.

        :param token_hash: Hex digest of the presented token.
        :param for_update: Lock the row (``SELECT ... FOR UPDATE``) when supported.
        :returns: Row or ``None``.
        :rtype: RefreshToken | None
        """
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        if for_update:
            stmt = stmt.with_for_update()
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def claim(self, token_id: uuid.UUID) -> bool:
        """Revoke ``token_id`` only if it is still active.

        :returns: ``True`` when this call flipped the row, ``False`` when a
                  concurrent rotation got there first.
        :rtype: bool
        """
        now = utcnow()
        result = self.session.execute(
            update(RefreshToken)
            .where(RefreshToken.id == token_id, RefreshToken.revoked.is_(False))
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        # Keep the identity map consistent with the UPDATE
        row = self.session.get(RefreshToken, token_id)
        if row is not None:
            self.session.refresh(row)
        return bool(result.rowcount)

    def revoke_all_for_user(self, user_id: uuid.UUID) -> int:
        """Revoke every active token of ``user_id``; return how many flipped."""
        result = self.session.execute(
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
            .values(revoked=True, revoked_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        return int(result.rowcount or 0)

    def create(self, user_id: uuid.UUID, token_hash: str, expires_at: datetime) -> RefreshToken:
        return self.add(RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at))


T = TypeVar("T", EmailVerification, PasswordReset)


class _SingleUseTokenRepository(BaseRepository[T], Generic[T]):
    """Shared lookups for emailed single-use tokens."""

    def get_by_hash(self, token_hash: str, *, for_update: bool = False) -> T | None:
        stmt = select(self.model).where(self.model.token_hash == token_hash)
        if for_update:
            stmt = stmt.with_for_update()
        return cast(T | None, self.session.execute(stmt).scalars().first())

    def create(self, user_id: uuid.UUID, token_hash: str, expires_at: datetime) -> T:
        return self.add(self.model(user_id=user_id, token_hash=token_hash, expires_at=expires_at))

    def mark_used(self, row: T) -> T:
        row.is_used = True
        self.flush()
        return row


class EmailVerificationRepository(_SingleUseTokenRepository[EmailVerification]):
    model = EmailVerification


class PasswordResetRepository(_SingleUseTokenRepository[PasswordReset]):
    model = PasswordReset
