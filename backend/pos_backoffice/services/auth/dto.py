# pos_backoffice/services/auth/dto.py
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for tenant registration.

    :param tenant_name: Business name; the tenant slug is derived from it.
    :param email: Owner email (normalized to lowercase).
    :param password: Raw password, hashed by the service.
    :param first_name: Owner first name.
    :param last_name: Owner last name.
    :param store_name: Name of the first store.
    :param store_address: Optional address of the first store.
    """

    tenant_name: str
    email: str
    password: str
    first_name: str
    last_name: str
    store_name: str
    store_address: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token (64 hex chars).
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    refresh_token: str


@dataclass(frozen=True, slots=True)
class VerifyEmailIn:
    token: str


@dataclass(frozen=True, slots=True)
class ForgotPasswordIn:
    email: str


@dataclass(frozen=True, slots=True)
class ResetPasswordIn:
    token: str
    password: str


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    """
    Input DTO for a password change by the signed-in user.

    :param user_id: Authenticated user.
    :param current_password: Must verify against the stored hash.
    :param new_password: Replacement password.
    """

    user_id: uuid.UUID
    current_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class AcceptInvitationIn:
    token: str
    password: str
    first_name: str
    last_name: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Public user profile.

    Never carries the password hash.
    """

    id: uuid.UUID
    tenant_id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    is_email_verified: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Signed access JWT.
    :type access_token: str
    :param refresh_token: Opaque refresh token, returned exactly once.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """Login/registration result: ``{user, tokens}``."""

    user: UserOut
    tokens: TokenPairOut


@dataclass(frozen=True, slots=True)
class RoleRefOut:
    id: uuid.UUID
    name: str
    is_system_default: bool


@dataclass(frozen=True, slots=True)
class StoreRefOut:
    id: uuid.UUID
    name: str
    is_active: bool


@dataclass(frozen=True, slots=True)
class MeOut:
    """
    Profile aggregation for the signed-in user.

    :param user: Public profile.
    :param roles: Assigned roles.
    :param permissions: ``{feature_slug: [actions]}`` union across roles.
    :param stores: Accessible stores (every tenant store under full access).
    :param all_stores_access: Whether the user holds the system-default role.
    """

    user: UserOut
    roles: list[RoleRefOut] = field(default_factory=list)
    permissions: dict[str, list[str]] = field(default_factory=dict)
    stores: list[StoreRefOut] = field(default_factory=list)
    all_stores_access: bool = False


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Lifetimes of the tokens minted by the authentication service.

    :param refresh_expires: Refresh token lifetime (168h).
    :param email_verification_expires: Verification token lifetime (24h).
    :param password_reset_expires: Reset token lifetime (1h).
    """

    refresh_expires: timedelta = timedelta(hours=168)
    email_verification_expires: timedelta = timedelta(hours=24)
    password_reset_expires: timedelta = timedelta(hours=1)
