"""Tenant and store models: the multi-tenant isolation boundary."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column, validates

from pos_backoffice.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Tenant(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Root of multi-tenant isolation.

    Every other tenant-scoped row carries ``tenant_id`` and every query that
    reads one filters by it.

    Fields
    ------
    name : str
        Display name entered at registration.
    slug : str
        URL-safe, globally unique key derived from ``name``.
    is_active : bool
        Soft switch for the whole tenant.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    __table_args__ = (UniqueConstraint("slug", name="uq_tenants_slug"),)


class Store(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """A physical point of sale belonging to a tenant."""

    __tablename__ = "stores"

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500))
    phone: Mapped[str | None] = mapped_column(String(50))
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_stores_tenant_name"),
        Index("ix_stores_tenant_id", "tenant_id"),
    )

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        """Trim the store name and reject blank values."""
        v = (value or "").strip()
        if not v:
            raise ValueError("Store name is required.")
        return v
