"""User repository: lookups by email and tenant-scoped listing."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from pos_backoffice.models.user import User, normalize_email
from pos_backoffice.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER hashes or verifies passwords; that belongs to the password
    hasher used by the services.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "email": User.email,
            "first_name": User.first_name,
            "last_name": User.last_name,
            "created_at": User.created_at,
        }

    def _default_sort(self) -> list[str]:
        return ["email"]

    def _updatable_fields(self) -> set[str]:
        """Profile fields editable by an administrator (not the password)."""
        return {"first_name", "last_name", "is_active"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive, globally unique).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == normalize_email(email))
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        return bool(self.session.execute(stmt).first())
