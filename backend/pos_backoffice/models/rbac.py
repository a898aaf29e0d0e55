"""Role-based access control models (features, roles, grants, assignments)."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pos_backoffice.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .tenant import Store

SYSTEM_ADMIN_ROLE = "Administrator"
SYSTEM_ADMIN_DESCRIPTION = "Full system access"


class Feature(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Static, hierarchical catalog of permissionable capabilities.

    Parents group children and declare no actions; each child declares the
    action vocabulary a role can be granted on it (``read``, ``create``...).
    Rows are seeded with stable ids and read-only at runtime.
    """

    __tablename__ = "features"

    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("features.id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    module: Mapped[str] = mapped_column(String(50), nullable=False)
    actions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (UniqueConstraint("slug", name="uq_features_slug"),)

    @property
    def is_leaf(self) -> bool:
        """A feature is grantable only when it declares actions."""
        return bool(self.actions)


class Role(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Named permission bundle inside a tenant.

    The system-default role (``Administrator``) is created at registration,
    implies access to every store and cannot be renamed or deleted.
    """

    __tablename__ = "roles"

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500))
    is_system_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_roles_tenant_name"),
        Index("ix_roles_tenant_id", "tenant_id"),
    )

    # Relationships
    permissions: Mapped[list[RolePermission]] = relationship(
        "RolePermission",
        back_populates="role",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )


class RolePermission(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """Grant of a subset of a feature's actions to a role."""

    __tablename__ = "role_permissions"

    role_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"), nullable=False
    )
    feature_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("features.id", ondelete="CASCADE"), nullable=False
    )
    actions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        UniqueConstraint("role_id", "feature_id", name="uq_role_permissions_role_feature"),
    )

    # Relationships
    role: Mapped[Role] = relationship("Role", back_populates="permissions")
    feature: Mapped[Feature] = relationship("Feature", lazy="selectin")


class UserRole(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """Assignment of a role to a user."""

    __tablename__ = "user_roles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"), nullable=False
    )
    assigned_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_roles_user_role"),
        Index("ix_user_roles_user_id", "user_id"),
    )

    role: Mapped[Role] = relationship("Role", lazy="selectin")


class UserStore(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """Restriction of a user to a specific store."""

    __tablename__ = "user_stores"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    store_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("stores.id", ondelete="CASCADE"), nullable=False
    )
    assigned_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_user_stores_user_store"),
        Index("ix_user_stores_user_id", "user_id"),
    )

    store: Mapped[Store] = relationship("Store", lazy="selectin")
