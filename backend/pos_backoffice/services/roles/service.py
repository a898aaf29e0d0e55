"""
RoleService
===========

Tenant role management and the feature catalog listing.

- Roles are tenant-scoped; a role of another tenant is reported as missing.
- The system-default role cannot be renamed or deleted.
- Permission updates replace every grant of the role in one transaction and
  only accept actions the referenced feature declares.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError

from pos_backoffice.models import Role, RolePermission
from pos_backoffice.services._shared.base import BaseService
from pos_backoffice.services._shared.errors import (
    ConflictError,
    ForbiddenError,
    ValidationError,
    violates,
)
from pos_backoffice.services.roles.dto import (
    FeatureNodeOut,
    PermissionIn,
    PermissionOut,
    RoleCreateIn,
    RoleOut,
    RoleUpdateIn,
)
from pos_backoffice.services.roles.feature_tree import build_feature_tree

log = logging.getLogger(__name__)

MSG_ROLE_EXISTS = "a role with this name already exists"


def to_permission_out(grant: RolePermission) -> PermissionOut:
    return PermissionOut(
        id=grant.id,
        feature_id=grant.feature_id,
        feature_slug=grant.feature.slug,
        feature_name=grant.feature.name,
        feature_module=grant.feature.module,
        actions=list(grant.actions),
    )


def to_role_out(role: Role, *, with_permissions: bool = False) -> RoleOut:
    permissions = None
    if with_permissions:
        permissions = sorted(
            (to_permission_out(p) for p in role.permissions),
            key=lambda p: (p.feature_module, p.feature_slug),
        )
    return RoleOut(
        id=role.id,
        tenant_id=role.tenant_id,
        name=role.name,
        description=role.description,
        is_system_default=role.is_system_default,
        created_at=role.created_at,
        updated_at=role.updated_at,
        permissions=permissions,
    )


class RoleService(BaseService):
    """Role CRUD, permission replacement and the feature tree."""

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_features(self) -> list[FeatureNodeOut]:
        """Return the whole feature catalog as a tree."""
        with self.ro_uow() as uow:
            return build_feature_tree(uow.features.list())

    def list_roles(self) -> list[RoleOut]:
        tenant_id = self.require_tenant()
        with self.ro_uow() as uow:
            return [to_role_out(r) for r in uow.roles.list_in_tenant(tenant_id)]

    def get_role(self, role_id: uuid.UUID) -> RoleOut:
        """
        Return a role with its permissions.

        :raises NotFoundError: If the role is missing or owned by another tenant.
        """
        tenant_id = self.require_tenant()
        with self.ro_uow() as uow:
            role = self.found("Role", uow.roles.get_in_tenant(tenant_id, role_id), role_id)
            return to_role_out(role, with_permissions=True)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create_role(self, dto: RoleCreateIn) -> RoleOut:
        """
        Create a (non system-default) role.

        :raises ConflictError: If the tenant already has a role with this name.
        """
        tenant_id = self.require_tenant()
        try:
            with self.rw_uow() as uow:
                if uow.roles.name_taken(tenant_id, dto.name):
                    raise ConflictError("Role", MSG_ROLE_EXISTS)
                role = uow.roles.add(
                    Role(tenant_id=tenant_id, name=dto.name.strip(), description=dto.description)
                )
                out = to_role_out(role)
        except IntegrityError as exc:
            if violates(exc, "uq_roles_tenant_name"):
                raise ConflictError("Role", MSG_ROLE_EXISTS) from exc
            raise
        return out

    def update_role(self, role_id: uuid.UUID, dto: RoleUpdateIn) -> RoleOut:
        """
        Rename or re-describe a role.

        :raises NotFoundError: If the role is not in the caller's tenant.
        :raises ForbiddenError: When renaming the system-default role.
        :raises ConflictError: If the new name is taken.
        """
        tenant_id = self.require_tenant()
        name = dto.name.strip()
        try:
            with self.rw_uow() as uow:
                role = self.found("Role", uow.roles.get_in_tenant(tenant_id, role_id), role_id)
                if role.is_system_default and name != role.name:
                    raise ForbiddenError("cannot rename system default roles")
                if uow.roles.name_taken(tenant_id, name, exclude_id=role.id):
                    raise ConflictError("Role", MSG_ROLE_EXISTS)
                uow.roles.update(role, name=name, description=dto.description)
                out = to_role_out(role)
        except IntegrityError as exc:
            if violates(exc, "uq_roles_tenant_name"):
                raise ConflictError("Role", MSG_ROLE_EXISTS) from exc
            raise
        return out

    def delete_role(self, role_id: uuid.UUID) -> None:
        """
        Delete a role; its grants and assignments go with it.

        Pending invitations granting the role are cancelled; older
        invitations stay on record with the role cleared.

        :raises ForbiddenError: For the system-default role.
        """
        tenant_id = self.require_tenant()
        with self.rw_uow() as uow:
            role = self.found("Role", uow.roles.get_in_tenant(tenant_id, role_id), role_id)
            if role.is_system_default:
                raise ForbiddenError("cannot delete system default roles")
            cancelled = uow.invitations.cancel_pending_for_role(role.id)
            uow.roles.delete(role)
        if cancelled:
            log.info(
                "pending invitations cancelled",
                extra={"event": "roles.invitations_cancelled", "role_id": str(role_id), "count": cancelled},
            )

    def update_permissions(
        self, role_id: uuid.UUID, permissions: list[PermissionIn]
    ) -> list[PermissionOut]:
        """
        Replace every grant of a role.

        :param role_id: Role in the caller's tenant.
        :param permissions: New grants; entries for the same feature are merged.
        :returns: The grants now stored.
        :raises ValidationError: For an unknown feature or an undeclared action.
        """
        tenant_id = self.require_tenant()
        with self.rw_uow() as uow:
            role = self.found("Role", uow.roles.get_in_tenant(tenant_id, role_id), role_id)

            features = {f.id: f for f in uow.features.list_by_ids(p.feature_id for p in permissions)}
            merged: dict[uuid.UUID, list[str]] = {}
            for entry in permissions:
                feature = features.get(entry.feature_id)
                if feature is None:
                    raise ValidationError(f"feature not found: {entry.feature_id}")
                for action in entry.actions:
                    if action not in feature.actions:
                        raise ValidationError(f"invalid action '{action}' for feature {feature.slug}")
                bucket = merged.setdefault(feature.id, [])
                bucket.extend(a for a in entry.actions if a not in bucket)

            uow.role_permissions.replace_for_role(role.id, merged.items())
            return sorted(
                (to_permission_out(p) for p in uow.role_permissions.list_for_role(role.id)),
                key=lambda p: (p.feature_module, p.feature_slug),
            )
