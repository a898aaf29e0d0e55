"""DTOs for RoleService and the feature catalog."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RoleCreateIn:
    name: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class RoleUpdateIn:
    """
    Input DTO for renaming/describing a role.

    :param name: New name (system-default roles cannot be renamed).
    :param description: Free text.
    """

    name: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class PermissionIn:
    """
    One grant of feature actions.

    :param feature_id: Feature the actions belong to.
    :param actions: Subset of the feature's declared actions.
    """

    feature_id: uuid.UUID
    actions: list[str]


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PermissionOut:
    id: uuid.UUID
    feature_id: uuid.UUID
    feature_slug: str
    feature_name: str
    feature_module: str
    actions: list[str]


@dataclass(frozen=True, slots=True)
class RoleOut:
    """
    Role projection; ``permissions`` is filled on detail reads only.
    """

    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str
    description: str | None
    is_system_default: bool
    created_at: datetime
    updated_at: datetime
    permissions: list[PermissionOut] | None = None


@dataclass(slots=True)
class FeatureNodeOut:
    """A feature with its children, as returned by the catalog listing."""

    id: uuid.UUID
    parent_id: uuid.UUID | None
    name: str
    slug: str
    module: str
    actions: list[str]
    sort_order: int
    children: list[FeatureNodeOut] = field(default_factory=list)
