from pos_backoffice.services.users.service import UserService

__all__ = ["UserService"]
