"""Argon2id adapter for the :class:`PasswordHasher` port."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field

from argon2 import PasswordHasher as _Argon2Hasher
from argon2 import Type
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from pos_backoffice.services._shared.errors import InternalError
from pos_backoffice.services._shared.ports import PasswordHasher


@dataclass(slots=True)
class Argon2PasswordHasher(PasswordHasher):
    """
    Memory-hard password hashing backed by ``argon2-cffi``.

    The produced PHC string (``$argon2id$v=19$m=...,t=...,p=...$salt$hash``)
    embeds every parameter, so hashes created with older settings keep
    verifying after a cost change.

    :param memory_cost: Memory in KiB (65536 = 64 MiB).
    :param time_cost: Number of iterations.
    :param parallelism: Degree of parallelism (lanes).
    :param salt_len: Random salt length in bytes.
    :param hash_len: Derived key length in bytes.
    """

    memory_cost: int = 65536
    time_cost: int = 3
    parallelism: int = 2
    salt_len: int = 16
    hash_len: int = 32
    _hasher: _Argon2Hasher = field(init=False, repr=False)
    _dummy: str | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        self._hasher = _Argon2Hasher(
            time_cost=self.time_cost,
            memory_cost=self.memory_cost,
            parallelism=self.parallelism,
            hash_len=self.hash_len,
            salt_len=self.salt_len,
            type=Type.ID,
        )

    @classmethod
    def from_config(cls, config) -> Argon2PasswordHasher:
        """Build the hasher from ``ARGON2_*`` configuration keys."""
        return cls(
            memory_cost=int(config["ARGON2_MEMORY"]),
            time_cost=int(config["ARGON2_ITERATIONS"]),
            parallelism=int(config["ARGON2_PARALLELISM"]),
            salt_len=int(config["ARGON2_SALT_LENGTH"]),
            hash_len=int(config["ARGON2_KEY_LENGTH"]),
        )

    def hash(self, plaintext: str) -> str:
        try:
            return self._hasher.hash(plaintext)
        except HashingError as exc:
            raise InternalError("password hashing failed") from exc

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Check ``plaintext`` against a stored PHC string.

        :returns: ``True`` on a match, ``False`` on a mismatch.
        :raises InternalError: If the stored hash is malformed or cannot be checked.
        """
        try:
            return self._hasher.verify(hashed, plaintext)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as exc:
            raise InternalError("password verification failed") from exc

    def dummy_hash(self) -> str:
        """
        Hash of a random secret, computed once per hasher.

        Verifying against it costs as much as verifying a real account.
        """
        if self._dummy is None:
            self._dummy = self.hash(secrets.token_urlsafe(32))
        return self._dummy
