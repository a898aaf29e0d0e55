"""Loading of :class:`AccessContext` from the credential store."""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from pos_backoffice.models import Role
from pos_backoffice.services._shared.base import BaseService
from pos_backoffice.services.authorization.context import AccessContext


def collect_permissions(roles: Iterable[Role]) -> dict[str, set[str]]:
    """
    Union the grants of ``roles`` into ``{feature_slug: actions}``.

    Granted actions are clipped to the actions the feature declares.
    """
    permissions: dict[str, set[str]] = {}
    for role in roles:
        for grant in role.permissions:
            declared = set(grant.feature.actions)
            permissions.setdefault(grant.feature.slug, set()).update(
                a for a in grant.actions if a in declared
            )
    return permissions


class AuthorizationService(BaseService):
    """
    Build the caller's :class:`AccessContext`.

    Runs on every authenticated request; nothing is cached between requests
    so a revoked role or store assignment applies to the very next call.
    """

    def load_context(self, *, user_id: uuid.UUID, tenant_id: uuid.UUID, email: str) -> AccessContext:
        """
        Join the user's roles to their grants and resolve the store scope.

        Roles of another tenant are ignored.

        :param user_id: Subject of the verified access token.
        :param tenant_id: Tenant claim of the verified access token.
        :param email: Email claim of the verified access token.
        :returns: The caller's access snapshot.
        :rtype: AccessContext
        """
        with self.ro_uow() as uow:
            roles = [r for r in uow.roles.list_for_user(user_id) if r.tenant_id == tenant_id]

            permissions = collect_permissions(roles)

            all_stores = any(r.is_system_default for r in roles)
            store_ids: frozenset[uuid.UUID] = frozenset()
            if not all_stores:
                store_ids = frozenset(uow.user_stores.store_ids_for_user(user_id))

        return AccessContext(
            user_id=user_id,
            tenant_id=tenant_id,
            email=email,
            permissions={slug: frozenset(actions) for slug, actions in permissions.items()},
            all_stores=all_stores,
            store_ids=store_ids,
        )
