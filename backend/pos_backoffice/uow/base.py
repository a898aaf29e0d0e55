"""
Unit of Work contract of the back office.

A unit of work is one transaction over every repository a use case needs:
tenant, user and RBAC rows plus the hashed token tables. Multi-row
workflows (registration, invitation acceptance, permission replacement) rely
on it to commit all of their writes or none.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pos_backoffice.repositories import (
        EmailVerificationRepository,
        FeatureRepository,
        InvitationRepository,
        PasswordResetRepository,
        RefreshTokenRepository,
        RolePermissionRepository,
        RoleRepository,
        StoreRepository,
        TenantRepository,
        UserRepository,
        UserRoleRepository,
        UserStoreRepository,
    )


class UnitOfWork(ABC):
    """Transactional boundary; commits on a clean exit, rolls back otherwise."""

    tenants: TenantRepository
    stores: StoreRepository
    users: UserRepository
    features: FeatureRepository
    roles: RoleRepository
    role_permissions: RolePermissionRepository
    user_roles: UserRoleRepository
    user_stores: UserStoreRepository
    refresh_tokens: RefreshTokenRepository
    email_verifications: EmailVerificationRepository
    password_resets: PasswordResetRepository
    invitations: InvitationRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
