"""Relational adapter for the :class:`RefreshTokenStore` port."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from pos_backoffice.services._shared.ports import (
    RefreshTokenStore,
    RefreshTokenView,
    RotationOutcome,
    RotationResult,
)
from pos_backoffice.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class SQLAlchemyRefreshTokenStore(RefreshTokenStore):
    """
    Refresh tokens persisted in the ``refresh_tokens`` table.

    Each call runs in its own short Unit of Work. Rotation locks the presented
    row (``SELECT ... FOR UPDATE`` on PostgreSQL) and then revokes it with a
    conditional ``UPDATE ... WHERE revoked = false``; only the caller whose
    update touched the row inserts the replacement, so two concurrent
    rotations of one token can never both succeed.
    """

    def register(self, *, user_id: uuid.UUID, token_hash: str, expires_at: datetime) -> None:
        with SQLAlchemyUnitOfWork() as uow:
            uow.refresh_tokens.create(user_id, token_hash, expires_at)

    def rotate(
        self,
        *,
        old_hash: str,
        new_hash: str,
        now: datetime,
        new_expires_at: datetime,
    ) -> RotationOutcome:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.get_by_hash(old_hash, for_update=True)
            if row is None:
                return RotationOutcome(RotationResult.NOT_FOUND)
            if row.revoked:
                return RotationOutcome(RotationResult.REVOKED, row.user_id)
            if row.expires_at <= now:
                return RotationOutcome(RotationResult.EXPIRED, row.user_id)

            user_id = row.user_id
            if not uow.refresh_tokens.claim(row.id):
                # Lost the race: another request rotated this token first
                log.info("refresh rotation lost a concurrent race", extra={"user_id": str(user_id)})
                return RotationOutcome(RotationResult.REVOKED, user_id)

            uow.refresh_tokens.create(user_id, new_hash, new_expires_at)
            return RotationOutcome(RotationResult.OK, user_id)

    def revoke(self, token_hash: str) -> bool:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.get_by_hash(token_hash, for_update=True)
            if row is None or row.revoked:
                return False
            return uow.refresh_tokens.claim(row.id)

    def revoke_all_for_user(self, user_id: uuid.UUID) -> int:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.revoke_all_for_user(user_id)

    def get(self, token_hash: str) -> RefreshTokenView | None:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.get_by_hash(token_hash)
            if row is None:
                return None
            return RefreshTokenView(
                token_hash=row.token_hash,
                user_id=row.user_id,
                expires_at=row.expires_at,
                revoked=row.revoked,
            )
