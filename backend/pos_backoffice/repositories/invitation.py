"""Invitation repository."""

from __future__ import annotations

import uuid
from typing import cast

from sqlalchemy import select, update

from pos_backoffice.models.invitation import Invitation, InvitationStatus
from pos_backoffice.repositories.base import BaseRepository


class InvitationRepository(BaseRepository[Invitation]):
    """Persistence-only repository for :class:`Invitation`."""

    model = Invitation

    def _sortable_fields(self):
        return {"created_at": Invitation.created_at, "email": Invitation.email}

    def _default_sort(self) -> list[str]:
        return ["-created_at"]

    def get_by_hash(self, token_hash: str, *, for_update: bool = False) -> Invitation | None:
        stmt = select(Invitation).where(Invitation.token_hash == token_hash)
        if for_update:
            stmt = stmt.with_for_update()
        return cast(Invitation | None, self.session.execute(stmt).scalars().first())

    def cancel_pending_for_role(self, role_id: uuid.UUID) -> int:
        """Cancel every pending invitation granting ``role_id``; return how many."""
        stmt = (
            update(Invitation)
            .where(Invitation.role_id == role_id, Invitation.status == InvitationStatus.PENDING)
            .values(status=InvitationStatus.CANCELLED)
            .execution_options(synchronize_session="fetch")
        )
        return self.session.execute(stmt).rowcount
