"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`pos_backoffice.services` without knowing internal
structure.

Re-exports
----------
- Base primitives (from ``pos_backoffice.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Authentication (from ``pos_backoffice.services.auth``)
    * :class:`AuthService`, :class:`RefreshTokenManager`

- Authorization (from ``pos_backoffice.services.authorization``)
    * :class:`AccessContext`, :class:`AuthorizationService`

- Administration services
    * :class:`RoleService`, :class:`InvitationService`,
      :class:`StoreService`, :class:`UserService`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Authentication lifecycle
from .auth.refresh_tokens import RefreshTokenManager
from .auth.service import AuthService

# Authorization
from .authorization import AccessContext, AuthorizationService

# Tenant administration
from .invitations import InvitationService
from .roles import RoleService
from .stores import StoreService
from .users import UserService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Auth
    "AuthService",
    "RefreshTokenManager",
    # Authorization
    "AccessContext",
    "AuthorizationService",
    # Administration
    "InvitationService",
    "RoleService",
    "StoreService",
    "UserService",
]
