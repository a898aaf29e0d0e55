from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum, auto
from typing import Protocol


class RotationResult(Enum):
    """Outcome of an atomic refresh rotation attempt."""

    OK = auto()
    NOT_FOUND = auto()
    EXPIRED = auto()
    REVOKED = auto()


@dataclass(frozen=True)
class RotationOutcome:
    """
    Result of :meth:`RefreshTokenStore.rotate`.

    :ivar result: What happened to the presented token.
    :ivar user_id: Owner of the presented token (``None`` when not found).
    """

    result: RotationResult
    user_id: uuid.UUID | None = None


@dataclass(frozen=True)
class RefreshTokenView:
    """
    Read-model for a stored refresh token.

    :ivar token_hash: SHA-256 digest of the plaintext.
    :ivar user_id: Owner user id.
    :ivar expires_at: Absolute expiration (UTC).
    :ivar revoked: Whether the token was rotated away or revoked.
    """

    token_hash: str
    user_id: uuid.UUID
    expires_at: datetime
    revoked: bool


class RefreshTokenStore(Protocol):
    """
    Stateful store for refresh tokens, keyed by token hash.

    Rotation MUST be atomic: of two concurrent rotations of one token exactly
    one returns ``OK``, the other observes ``REVOKED``.
    """

    def register(self, *, user_id: uuid.UUID, token_hash: str, expires_at: datetime) -> None:
        """Persist a brand-new active token. Runs before the plaintext leaves the server."""

    def rotate(
        self,
        *,
        old_hash: str,
        new_hash: str,
        now: datetime,
        new_expires_at: datetime,
    ) -> RotationOutcome:
        """
        Atomically revoke ``old_hash`` and register ``new_hash`` for the same user.

        Checks run in order: missing, revoked, expired. Only ``OK`` writes.
        """

    def revoke(self, token_hash: str) -> bool:
        """Revoke a single token. :returns: True if an active token was flipped."""

    def revoke_all_for_user(self, user_id: uuid.UUID) -> int:
        """
        Revoke every token of the given user.

        :returns: Number of tokens affected.
        """

    def get(self, token_hash: str) -> RefreshTokenView | None:
        """Fetch a single token snapshot (if present)."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh token store with atomic rotation behavior.

    .. note::
       Uses a threading lock to simulate atomicity in unit tests.
    """

    def __init__(self) -> None:
        self._by_hash: dict[str, RefreshTokenView] = {}
        self._lock = threading.Lock()

    def register(self, *, user_id: uuid.UUID, token_hash: str, expires_at: datetime) -> None:
        with self._lock:
            self._by_hash[token_hash] = RefreshTokenView(
                token_hash=token_hash, user_id=user_id, expires_at=expires_at, revoked=False
            )

    def rotate(
        self,
        *,
        old_hash: str,
        new_hash: str,
        now: datetime,
        new_expires_at: datetime,
    ) -> RotationOutcome:
        with self._lock:
            current = self._by_hash.get(old_hash)
            if current is None:
                return RotationOutcome(RotationResult.NOT_FOUND)
            if current.revoked:
                return RotationOutcome(RotationResult.REVOKED, current.user_id)
            if current.expires_at <= now:
                return RotationOutcome(RotationResult.EXPIRED, current.user_id)

            self._by_hash[old_hash] = replace(current, revoked=True)
            self._by_hash[new_hash] = RefreshTokenView(
                token_hash=new_hash,
                user_id=current.user_id,
                expires_at=new_expires_at,
                revoked=False,
            )
            return RotationOutcome(RotationResult.OK, current.user_id)

    def revoke(self, token_hash: str) -> bool:
        with self._lock:
            current = self._by_hash.get(token_hash)
            if current is None or current.revoked:
                return False
            self._by_hash[token_hash] = replace(current, revoked=True)
            return True

    def revoke_all_for_user(self, user_id: uuid.UUID) -> int:
        with self._lock:
            flipped = 0
            for key, view in self._by_hash.items():
                if view.user_id == user_id and not view.revoked:
                    self._by_hash[key] = replace(view, revoked=True)
                    flipped += 1
            return flipped

    def get(self, token_hash: str) -> RefreshTokenView | None:
        return self._by_hash.get(token_hash)
