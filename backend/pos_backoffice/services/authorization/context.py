"""Per-request access context: permission map and store scope."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class AccessContext:
    """
    Immutable authorization snapshot of the caller.

    Built once per authenticated request and consulted by every permission
    and store check. All checks fail closed.

    Attributes
    ----------
    user_id, tenant_id, email:
        Identity taken from the verified access token.
    permissions:
        ``{feature_slug: frozenset(actions)}``, the union over the user's roles.
    all_stores:
        ``True`` when the user holds the system-default role; the store scope
        is then "every store of the tenant" rather than a list.
    store_ids:
        Explicit store assignments, used only when ``all_stores`` is false.
    """

    user_id: uuid.UUID
    tenant_id: uuid.UUID
    email: str
    permissions: Mapping[str, frozenset[str]] = field(default_factory=dict)
    all_stores: bool = False
    store_ids: frozenset[uuid.UUID] = frozenset()

    @property
    def is_admin(self) -> bool:
        """Holding the system-default role (same condition as full store access)."""
        return self.all_stores

    def has_permission(self, slug: str, action: str) -> bool:
        """Return ``True`` only if ``action`` is granted on feature ``slug``."""
        if not slug or not action:
            return False
        return action in self.permissions.get(slug, frozenset())

    def can_access_store(self, store_id: uuid.UUID) -> bool:
        if self.all_stores:
            return True
        return store_id in self.store_ids

    def accessible_store_ids(self) -> frozenset[uuid.UUID] | None:
        """Return the explicit store scope, or ``None`` meaning "all stores"."""
        if self.all_stores:
            return None
        return self.store_ids

    def permission_map(self) -> dict[str, list[str]]:
        """JSON-friendly copy of the permission map."""
        return {slug: sorted(actions) for slug, actions in sorted(self.permissions.items())}
