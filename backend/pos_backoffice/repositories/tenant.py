"""Repositories for tenants and their stores."""

from __future__ import annotations

import uuid

from sqlalchemy import func, select

from pos_backoffice.models.tenant import Store, Tenant
from pos_backoffice.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Persistence-only repository for :class:`Tenant`."""

    model = Tenant

    def slug_exists(self, slug: str) -> bool:
        """Return ``True`` when a tenant already uses ``slug``."""
        stmt = select(Tenant.id).where(Tenant.slug == slug)
        return self.session.execute(stmt).first() is not None


class StoreRepository(BaseRepository[Store]):
    """Persistence-only repository for :class:`Store` (always tenant-scoped)."""

    model = Store

    def _sortable_fields(self):
        return {"name": Store.name, "created_at": Store.created_at}

    def _default_sort(self) -> list[str]:
        return ["name"]

    def _updatable_fields(self) -> set[str]:
        return {"name", "address", "phone", "is_active"}

    def name_taken(
        self, tenant_id: uuid.UUID, name: str, *, exclude_id: uuid.UUID | None = None
    ) -> bool:
        """Check whether ``name`` is already used by another store of the tenant.

        :param tenant_id: Owning tenant.
        :param name: Candidate store name.
        :param exclude_id: Store being renamed, ignored in the check.
        :returns: ``True`` if a conflicting store exists.
        :rtype: bool
        """
        stmt = select(Store.id).where(Store.tenant_id == tenant_id, Store.name == name.strip())
        if exclude_id is not None:
            stmt = stmt.where(Store.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def count_in_tenant(self, tenant_id: uuid.UUID, ids: list[uuid.UUID]) -> int:
        """Count how many of ``ids`` are stores owned by ``tenant_id``."""
        if not ids:
            return 0
        stmt = (
            select(func.count())
            .select_from(Store)
            .where(Store.tenant_id == tenant_id, Store.id.in_(ids))
        )
        return int(self.session.execute(stmt).scalar_one())

    def list_by_ids(self, tenant_id: uuid.UUID, ids: list[uuid.UUID]) -> list[Store]:
        if not ids:
            return []
        stmt = (
            select(Store)
            .where(Store.tenant_id == tenant_id, Store.id.in_(ids))
            .order_by(Store.name.asc(), Store.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())
