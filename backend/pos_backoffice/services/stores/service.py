"""
StoreService
============

Stores of the caller's tenant, filtered by the caller's store scope.

- A store of another tenant is reported as missing (404).
- A store of the tenant outside the caller's scope is refused (403).
"""

from __future__ import annotations

import uuid
from dataclasses import asdict

from sqlalchemy.exc import IntegrityError

from pos_backoffice.models import Store
from pos_backoffice.services._shared.base import BaseService
from pos_backoffice.services._shared.errors import ConflictError, ForbiddenError, violates
from pos_backoffice.services.authorization.context import AccessContext
from pos_backoffice.services.stores.dto import StoreCreateIn, StoreOut, StoreUpdateIn

MSG_STORE_EXISTS = "a store with this name already exists in your tenant"


def to_store_out(store: Store) -> StoreOut:
    return StoreOut(
        id=store.id,
        tenant_id=store.tenant_id,
        name=store.name,
        address=store.address,
        phone=store.phone,
        is_active=store.is_active,
        created_at=store.created_at,
        updated_at=store.updated_at,
    )


class StoreService(BaseService):
    """Store listing, lookup and administration."""

    def list(self, access: AccessContext) -> list[StoreOut]:
        """
        Return the stores the caller may see.

        :param access: Caller's access snapshot; full access lists every store.
        """
        tenant_id = self.require_tenant()
        scope = access.accessible_store_ids()
        with self.ro_uow() as uow:
            if scope is None:
                stores = uow.stores.list_in_tenant(tenant_id)
            else:
                stores = uow.stores.list_by_ids(tenant_id, list(scope))
            return [to_store_out(s) for s in stores]

    def get(self, store_id: uuid.UUID, access: AccessContext) -> StoreOut:
        """
        :raises NotFoundError: If the store is not in the caller's tenant.
        :raises ForbiddenError: If it is outside the caller's store scope.
        """
        tenant_id = self.require_tenant()
        with self.ro_uow() as uow:
            store = self.found("Store", uow.stores.get_in_tenant(tenant_id, store_id), store_id)
            if not access.can_access_store(store.id):
                raise ForbiddenError("no access to this store")
            return to_store_out(store)

    def create(self, dto: StoreCreateIn) -> StoreOut:
        """
        :raises ConflictError: If the tenant already has a store with this name.
        """
        tenant_id = self.require_tenant()
        try:
            with self.rw_uow() as uow:
                if uow.stores.name_taken(tenant_id, dto.name):
                    raise ConflictError("Store", MSG_STORE_EXISTS)
                store = uow.stores.add(
                    Store(tenant_id=tenant_id, name=dto.name, address=dto.address, phone=dto.phone)
                )
                out = to_store_out(store)
        except IntegrityError as exc:
            if violates(exc, "uq_stores_tenant_name"):
                raise ConflictError("Store", MSG_STORE_EXISTS) from exc
            raise
        return out

    def update(self, store_id: uuid.UUID, dto: StoreUpdateIn) -> StoreOut:
        """
        Apply a partial update.

        :raises NotFoundError: If the store is not in the caller's tenant.
        :raises ConflictError: If the new name is taken.
        """
        tenant_id = self.require_tenant()
        changes = {k: v for k, v in asdict(dto).items() if v is not None}
        try:
            with self.rw_uow() as uow:
                store = self.found("Store", uow.stores.get_in_tenant(tenant_id, store_id), store_id)
                name = changes.get("name")
                if name is not None and uow.stores.name_taken(tenant_id, name, exclude_id=store.id):
                    raise ConflictError("Store", MSG_STORE_EXISTS)
                uow.stores.update(store, **changes)
                out = to_store_out(store)
        except IntegrityError as exc:
            if violates(exc, "uq_stores_tenant_name"):
                raise ConflictError("Store", MSG_STORE_EXISTS) from exc
            raise
        return out

    def deactivate(self, store_id: uuid.UUID) -> None:
        """
        Soft-deactivate a store; its row and assignments are kept.

        :raises NotFoundError: If the store is not in the caller's tenant.
        """
        tenant_id = self.require_tenant()
        with self.rw_uow() as uow:
            store = self.found("Store", uow.stores.get_in_tenant(tenant_id, store_id), store_id)
            uow.stores.update(store, is_active=False)
