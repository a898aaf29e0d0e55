"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AcceptInvitationSchema,
    AuthResultSchema,
    ChangePasswordSchema,
    ForgotPasswordSchema,
    LoginSchema,
    MeSchema,
    RefreshTokenSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenPairSchema,
    TokenSchema,
)
from .common import MessageSchema, RoleRefSchema, StoreRefSchema
from .invitation import InvitationCreateSchema, InvitationSchema
from .role import (
    FeatureNodeSchema,
    PermissionSchema,
    PermissionsUpdateSchema,
    RoleSchema,
    RoleWriteSchema,
)
from .store import StoreCreateSchema, StoreSchema, StoreUpdateSchema
from .user import UserDetailSchema, UserSchema, UserStoresSchema, UserUpdateSchema

__all__ = [
    "AcceptInvitationSchema",
    "AuthResultSchema",
    "ChangePasswordSchema",
    "ForgotPasswordSchema",
    "LoginSchema",
    "MeSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "ResetPasswordSchema",
    "TokenPairSchema",
    "TokenSchema",
    "MessageSchema",
    "RoleRefSchema",
    "StoreRefSchema",
    "InvitationCreateSchema",
    "InvitationSchema",
    "FeatureNodeSchema",
    "PermissionSchema",
    "PermissionsUpdateSchema",
    "RoleSchema",
    "RoleWriteSchema",
    "StoreCreateSchema",
    "StoreSchema",
    "StoreUpdateSchema",
    "UserDetailSchema",
    "UserSchema",
    "UserStoresSchema",
    "UserUpdateSchema",
]
