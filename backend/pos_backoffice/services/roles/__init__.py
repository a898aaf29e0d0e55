from pos_backoffice.services.roles.service import RoleService

__all__ = ["RoleService"]
