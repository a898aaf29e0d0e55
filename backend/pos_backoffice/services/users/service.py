"""
UserService
===========

Administration of the users of the caller's tenant.

Deactivating a user (directly or through an update) also revokes every
refresh token they hold, in the same transaction; access tokens already
issued stay valid until they expire.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict

from pos_backoffice.models import User
from pos_backoffice.services._shared.base import BaseService
from pos_backoffice.services._shared.errors import ValidationError
from pos_backoffice.services.auth.dto import RoleRefOut, StoreRefOut, UserOut
from pos_backoffice.services.auth.service import to_user_out
from pos_backoffice.services.users.dto import UserDetailOut, UserStoresIn, UserUpdateIn

log = logging.getLogger(__name__)


class UserService(BaseService):
    """Tenant-scoped user listing, detail, update and store scoping."""

    def list(self) -> list[UserOut]:
        tenant_id = self.require_tenant()
        with self.ro_uow() as uow:
            return [to_user_out(u) for u in uow.users.list_in_tenant(tenant_id)]

    def get(self, user_id: uuid.UUID) -> UserDetailOut:
        """
        Return a user with their roles and assigned stores.

        :raises NotFoundError: If the user is not in the caller's tenant.
        """
        tenant_id = self.require_tenant()
        with self.ro_uow() as uow:
            user = self.found("User", uow.users.get_in_tenant(tenant_id, user_id), user_id)
            return self._detail(uow, user)

    def update(self, user_id: uuid.UUID, dto: UserUpdateIn) -> UserOut:
        """
        Apply a partial update.

        :raises NotFoundError: If the user is not in the caller's tenant.
        """
        tenant_id = self.require_tenant()
        changes = {k: v for k, v in asdict(dto).items() if v is not None}
        with self.rw_uow() as uow:
            user = self.found("User", uow.users.get_in_tenant(tenant_id, user_id), user_id)
            was_active = user.is_active
            uow.users.update(user, **changes)
            if was_active and not user.is_active:
                self._revoke_sessions(uow, user)
            return to_user_out(user)

    def deactivate(self, user_id: uuid.UUID) -> None:
        """
        Soft-deactivate a user and end their refresh sessions.

        :raises NotFoundError: If the user is not in the caller's tenant.
        """
        tenant_id = self.require_tenant()
        with self.rw_uow() as uow:
            user = self.found("User", uow.users.get_in_tenant(tenant_id, user_id), user_id)
            uow.users.update(user, is_active=False)
            self._revoke_sessions(uow, user)

    def update_stores(self, user_id: uuid.UUID, dto: UserStoresIn) -> list[StoreRefOut]:
        """
        Replace the user's store assignments.

        :returns: The stores now assigned.
        :raises NotFoundError: If the user is not in the caller's tenant.
        :raises ValidationError: ``"store not found: <id>"`` for a store outside the tenant.
        """
        tenant_id = self.require_tenant()
        store_ids = list(dict.fromkeys(dto.store_ids))
        with self.rw_uow() as uow:
            user = self.found("User", uow.users.get_in_tenant(tenant_id, user_id), user_id)
            stores = uow.stores.list_by_ids(tenant_id, store_ids)
            known = {s.id for s in stores}
            for store_id in store_ids:
                if store_id not in known:
                    raise ValidationError(f"store not found: {store_id}")
            uow.user_stores.replace_for_user(user.id, store_ids, assigned_by=self.ctx.actor_id)
            return [StoreRefOut(id=s.id, name=s.name, is_active=s.is_active) for s in stores]

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _detail(uow, user: User) -> UserDetailOut:
        roles = [r for r in uow.roles.list_for_user(user.id) if r.tenant_id == user.tenant_id]
        stores = uow.stores.list_by_ids(user.tenant_id, uow.user_stores.store_ids_for_user(user.id))
        return UserDetailOut(
            user=to_user_out(user),
            roles=[RoleRefOut(id=r.id, name=r.name, is_system_default=r.is_system_default) for r in roles],
            stores=[StoreRefOut(id=s.id, name=s.name, is_active=s.is_active) for s in stores],
        )

    @staticmethod
    def _revoke_sessions(uow, user: User) -> None:
        revoked = uow.refresh_tokens.revoke_all_for_user(user.id)
        log.info(
            "user deactivated",
            extra={"event": "user.deactivate", "user_id": str(user.id), "revoked": revoked},
        )
