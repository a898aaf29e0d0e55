"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from pos_backoffice.repositories.base import BaseRepository
from pos_backoffice.repositories.invitation import InvitationRepository
from pos_backoffice.repositories.rbac import (
    FeatureRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRoleRepository,
    UserStoreRepository,
)
from pos_backoffice.repositories.tenant import StoreRepository, TenantRepository
from pos_backoffice.repositories.tokens import (
    EmailVerificationRepository,
    PasswordResetRepository,
    RefreshTokenRepository,
)
from pos_backoffice.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    # Domain
    "EmailVerificationRepository",
    "FeatureRepository",
    "InvitationRepository",
    "PasswordResetRepository",
    "RefreshTokenRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "StoreRepository",
    "TenantRepository",
    "UserRepository",
    "UserRoleRepository",
    "UserStoreRepository",
]
