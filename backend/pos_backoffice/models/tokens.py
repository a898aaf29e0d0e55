"""Persistence for opaque, hashed tokens (refresh, email verification, reset).

Only the SHA-256 digest of each token is stored; the plaintext is handed to
the client (or the notifier) once and cannot be recovered.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column

from pos_backoffice.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin, UTCDateTime


class RefreshToken(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    One link of a refresh-token chain.

    State machine: ``active`` -> ``revoked`` (terminal). Revoked on rotation,
    logout, password reset, or reuse detection.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    revoked_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    __table_args__ = (
        UniqueConstraint("token_hash", name="uq_refresh_tokens_token_hash"),
        Index("ix_refresh_tokens_user_id", "user_id"),
    )


class _SingleUseTokenMixin(PKMixin, ReprMixin, CreatedAtMixin):
    """Columns shared by single-use, emailed tokens (kept for audit)."""

    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    is_used: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )


class EmailVerification(_SingleUseTokenMixin, db.Model):
    """Proof-of-possession token for a user's email address."""

    __tablename__ = "email_verifications"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (UniqueConstraint("token_hash", name="uq_email_verifications_token_hash"),)


class PasswordReset(_SingleUseTokenMixin, db.Model):
    """Short-lived token allowing a password to be replaced without login."""

    __tablename__ = "password_resets"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (UniqueConstraint("token_hash", name="uq_password_resets_token_hash"),)
