"""Repositories for features, roles, permission grants and assignments."""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import delete, select

from pos_backoffice.models.rbac import Feature, Role, RolePermission, UserRole, UserStore
from pos_backoffice.repositories.base import BaseRepository


class FeatureRepository(BaseRepository[Feature]):
    """Read access to the static feature catalog."""

    model = Feature

    def _sortable_fields(self):
        return {"sort_order": Feature.sort_order, "name": Feature.name}

    def _default_sort(self) -> list[str]:
        return ["sort_order", "name"]

    def list_by_ids(self, ids: Iterable[uuid.UUID]) -> list[Feature]:
        wanted = list(ids)
        if not wanted:
            return []
        stmt = select(Feature).where(Feature.id.in_(wanted))
        return list(self.session.execute(stmt).scalars().all())

    def list_leaves(self) -> list[Feature]:
        """Return every feature that declares at least one action."""
        return [f for f in self.list() if f.is_leaf]


class RoleRepository(BaseRepository[Role]):
    """Persistence-only repository for tenant roles."""

    model = Role

    def _sortable_fields(self):
        return {"name": Role.name, "created_at": Role.created_at}

    def _default_sort(self) -> list[str]:
        return ["name"]

    def _updatable_fields(self) -> set[str]:
        return {"name", "description"}

    def name_taken(
        self, tenant_id: uuid.UUID, name: str, *, exclude_id: uuid.UUID | None = None
    ) -> bool:
        stmt = select(Role.id).where(Role.tenant_id == tenant_id, Role.name == name.strip())
        if exclude_id is not None:
            stmt = stmt.where(Role.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def list_for_user(self, user_id: uuid.UUID) -> list[Role]:
        """Return the roles assigned to ``user_id`` (permissions eagerly loaded)."""
        stmt = (
            select(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.name.asc())
        )
        return list(self.session.execute(stmt).scalars().all())


class RolePermissionRepository(BaseRepository[RolePermission]):
    """Grants of feature actions to roles."""

    model = RolePermission

    def list_for_role(self, role_id: uuid.UUID) -> list[RolePermission]:
        stmt = select(RolePermission).where(RolePermission.role_id == role_id)
        return list(self.session.execute(stmt).scalars().all())

    def replace_for_role(
        self, role_id: uuid.UUID, grants: Iterable[tuple[uuid.UUID, list[str]]]
    ) -> list[RolePermission]:
        """Replace every grant of ``role_id`` with ``grants``.

        Grants with an empty action list are skipped.

        :param role_id: Role whose permissions are rewritten.
        :param grants: ``(feature_id, actions)`` pairs.
        :returns: The newly staged rows.
        :rtype: list[RolePermission]
        """
        self.session.execute(delete(RolePermission).where(RolePermission.role_id == role_id))
        # Drop stale identities so the role's relationship reloads
        role = self.session.get(Role, role_id)
        if role is not None:
            self.session.expire(role, ["permissions"])
        rows = [
            RolePermission(role_id=role_id, feature_id=feature_id, actions=list(actions))
            for feature_id, actions in grants
            if actions
        ]
        self.session.add_all(rows)
        self.flush()
        return rows


class UserRoleRepository(BaseRepository[UserRole]):
    """Role assignments of users."""

    model = UserRole

    def assign(
        self, user_id: uuid.UUID, role_id: uuid.UUID, *, assigned_by: uuid.UUID | None
    ) -> UserRole:
        return self.add(UserRole(user_id=user_id, role_id=role_id, assigned_by=assigned_by))


class UserStoreRepository(BaseRepository[UserStore]):
    """Store restrictions of users."""

    model = UserStore

    def store_ids_for_user(self, user_id: uuid.UUID) -> list[uuid.UUID]:
        stmt = select(UserStore.store_id).where(UserStore.user_id == user_id)
        return list(self.session.execute(stmt).scalars().all())

    def replace_for_user(
        self,
        user_id: uuid.UUID,
        store_ids: Iterable[uuid.UUID],
        *,
        assigned_by: uuid.UUID | None,
    ) -> list[UserStore]:
        """Replace the store restrictions of ``user_id`` with ``store_ids``."""
        self.session.execute(delete(UserStore).where(UserStore.user_id == user_id))
        rows = [
            UserStore(user_id=user_id, store_id=store_id, assigned_by=assigned_by)
            for store_id in dict.fromkeys(store_ids)
        ]
        self.session.add_all(rows)
        self.flush()
        return rows
