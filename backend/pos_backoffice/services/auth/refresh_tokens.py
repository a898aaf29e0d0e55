"""Refresh token lifecycle: issue, rotate with reuse detection, revoke."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta

from pos_backoffice.infra.security.token_hasher import generate_token, hash_token
from pos_backoffice.models.base import utcnow
from pos_backoffice.services._shared.errors import UnauthorizedError
from pos_backoffice.services._shared.ports import RefreshTokenStore, RotationResult

log = logging.getLogger(__name__)

MSG_INVALID = "invalid refresh token"
MSG_REVOKED = "refresh token has been revoked"
MSG_EXPIRED = "refresh token has expired"


class RefreshTokenManager:
    """
    Opaque refresh tokens over a :class:`RefreshTokenStore`.

    Each token is ``active`` until it is rotated, logged out or swept by a
    revoke-all; ``revoked`` is terminal. Presenting a revoked token again is
    treated as theft: every token of the owner is revoked, which ends all of
    their sessions.
    """

    def __init__(
        self,
        *,
        store: RefreshTokenStore,
        ttl: timedelta = timedelta(hours=168),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.ttl = ttl
        self._clock = clock

    def issue(self, user_id: uuid.UUID) -> str:
        """
        Create and persist a new refresh token for ``user_id``.

        :returns: The plaintext token; only its digest is stored.
        :rtype: str
        """
        plain, digest = generate_token()
        self.store.register(user_id=user_id, token_hash=digest, expires_at=self._clock() + self.ttl)
        return plain

    def rotate(self, plain: str) -> tuple[str, uuid.UUID]:
        """
        Consume ``plain`` and return its replacement.

        :returns: ``(new_plaintext, user_id)``.
        :raises UnauthorizedError: For unknown, revoked (reuse) or expired tokens.
        """
        now = self._clock()
        new_plain, new_digest = generate_token()
        outcome = self.store.rotate(
            old_hash=hash_token(plain),
            new_hash=new_digest,
            now=now,
            new_expires_at=now + self.ttl,
        )

        if outcome.result is RotationResult.OK and outcome.user_id is not None:
            return new_plain, outcome.user_id

        if outcome.result is RotationResult.REVOKED and outcome.user_id is not None:
            log.warning(
                "refresh token reuse detected; revoking every session of the user",
                extra={"event": "auth.refresh_reuse", "user_id": str(outcome.user_id)},
            )
            self.store.revoke_all_for_user(outcome.user_id)
            raise UnauthorizedError(MSG_REVOKED)

        if outcome.result is RotationResult.EXPIRED:
            raise UnauthorizedError(MSG_EXPIRED)

        raise UnauthorizedError(MSG_INVALID)

    def revoke(self, plain: str) -> None:
        """Revoke one token. Unknown or already revoked tokens are ignored."""
        self.store.revoke(hash_token(plain))

    def revoke_all(self, user_id: uuid.UUID) -> int:
        return self.store.revoke_all_for_user(user_id)
