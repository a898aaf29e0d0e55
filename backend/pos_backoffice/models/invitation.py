"""Invitation model: a pending offer to join a tenant with a given role."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, validates

from pos_backoffice.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, UTCDateTime
from .user import normalize_email


class InvitationStatus(str, Enum):
    """Lifecycle of an invitation. ``accepted`` and ``cancelled`` are terminal."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"


class Invitation(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Invitation to join a tenant.

    Fields
    ------
    invited_by : uuid.UUID
        User who created the invitation; recorded as ``assigned_by`` on the
        role and store assignments created at acceptance.
    role_id : uuid.UUID | None
        Role granted on acceptance. Cleared when the role is deleted; pending
        invitations are cancelled first.
    store_ids : list[str]
        Stores the new user is scoped to (string UUIDs).
    token_hash : str
        SHA-256 digest of the emailed token.
    """

    __tablename__ = "invitations"

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    invited_by: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("roles.id", ondelete="SET NULL"), nullable=True
    )
    store_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[InvitationStatus] = mapped_column(
        SAEnum(
            InvitationStatus,
            name="enum_invitation_status",
            native_enum=False,
            create_constraint=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=InvitationStatus.PENDING,
    )
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    __table_args__ = (
        UniqueConstraint("token_hash", name="uq_invitations_token_hash"),
        Index("ix_invitations_tenant_id", "tenant_id"),
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return normalize_email(value)

    @property
    def store_uuids(self) -> list[uuid.UUID]:
        return [uuid.UUID(str(s)) for s in self.store_ids or []]
