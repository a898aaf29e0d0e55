"""DTOs for UserService (tenant user administration)."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from pos_backoffice.services.auth.dto import RoleRefOut, StoreRefOut, UserOut


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Partial profile update made by an administrator.

    :param first_name: New first name, if provided.
    :param last_name: New last name, if provided.
    :param is_active: Activate or deactivate the account.
    """

    first_name: str | None = None
    last_name: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True, slots=True)
class UserStoresIn:
    store_ids: list[uuid.UUID] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class UserDetailOut:
    user: UserOut
    roles: list[RoleRefOut] = field(default_factory=list)
    stores: list[StoreRefOut] = field(default_factory=list)
