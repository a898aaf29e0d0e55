"""SQLAlchemy models registered on the shared metadata."""

from pos_backoffice.models.invitation import Invitation, InvitationStatus
from pos_backoffice.models.rbac import (
    SYSTEM_ADMIN_DESCRIPTION,
    SYSTEM_ADMIN_ROLE,
    Feature,
    Role,
    RolePermission,
    UserRole,
    UserStore,
)
from pos_backoffice.models.tenant import Store, Tenant
from pos_backoffice.models.tokens import EmailVerification, PasswordReset, RefreshToken
from pos_backoffice.models.user import User

__all__ = [
    "EmailVerification",
    "Feature",
    "Invitation",
    "InvitationStatus",
    "PasswordReset",
    "RefreshToken",
    "Role",
    "RolePermission",
    "SYSTEM_ADMIN_DESCRIPTION",
    "SYSTEM_ADMIN_ROLE",
    "Store",
    "Tenant",
    "User",
    "UserRole",
    "UserStore",
]
