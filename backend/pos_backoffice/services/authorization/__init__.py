"""Role/permission and store-scope authorization."""

from pos_backoffice.services.authorization.context import AccessContext
from pos_backoffice.services.authorization.service import AuthorizationService

__all__ = ["AccessContext", "AuthorizationService"]
