"""DTOs for StoreService."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class StoreCreateIn:
    name: str
    address: str | None = None
    phone: str | None = None


@dataclass(frozen=True, slots=True)
class StoreUpdateIn:
    """
    Partial update; ``None`` leaves a field untouched.

    :param name: New unique-in-tenant name.
    :param address: New address.
    :param phone: New phone.
    :param is_active: Soft-close or reopen the store.
    """

    name: str | None = None
    address: str | None = None
    phone: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True, slots=True)
class StoreOut:
    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str
    address: str | None
    phone: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
