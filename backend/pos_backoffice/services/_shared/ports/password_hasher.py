from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for slow, salted password hashing.

    ``verify`` returns ``False`` on a mismatch. Any other failure (malformed
    stored hash, backend error) is raised as
    :class:`~pos_backoffice.services._shared.errors.InternalError`.
    """

    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, hashed: str) -> bool: ...

    def dummy_hash(self) -> str:
        """Return a hash of a throwaway secret, built with the current cost settings."""
        ...


class StubPasswordHasher(PasswordHasher):
    """Reversible, instant hasher used in unit tests."""

    PREFIX = "stub$"

    def hash(self, plaintext: str) -> str:
        return f"{self.PREFIX}{plaintext[::-1]}"

    def verify(self, plaintext: str, hashed: str) -> bool:
        return hashed == self.hash(plaintext)

    def dummy_hash(self) -> str:
        return self.hash("unused")
