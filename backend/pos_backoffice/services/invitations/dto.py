"""DTOs for InvitationService."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class InvitationCreateIn:
    """
    Input DTO for inviting a person into the caller's tenant.

    :param email: Invitee email (normalized to lowercase).
    :param role_id: Role granted on acceptance; must belong to the tenant.
    :param store_ids: Stores the invitee will be scoped to.
    """

    email: str
    role_id: uuid.UUID
    store_ids: list[uuid.UUID] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class InvitationOut:
    id: uuid.UUID
    tenant_id: uuid.UUID
    invited_by: uuid.UUID
    email: str
    role_id: uuid.UUID | None
    store_ids: list[uuid.UUID]
    status: str
    expires_at: datetime
    created_at: datetime
