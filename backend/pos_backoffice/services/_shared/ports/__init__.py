"""
pos_backoffice.services._shared.ports
=====================================

*Ports* (hexagonal interfaces) for the authentication infrastructure.

They decouple the service layer from the concrete password hashing, token
signing, refresh-token persistence and notification mechanisms.

Modules
-------
- :mod:`password_hasher`:
    :class:`~.PasswordHasher`, slow salted password hashing.
- :mod:`token_provider`:
    :class:`~.TokenProvider`, signed access-token creation and decoding.
- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore`, :class:`~.RotationResult` and
    :class:`~.RotationOutcome`, persistence and atomic rotation of refresh tokens.
- :mod:`notifier`:
    :class:`~.Notifier`, hand-off of emailed tokens.

Concrete adapters live under ``pos_backoffice.infra``. Each port ships an
in-process double used by the unit tests.
"""

from __future__ import annotations

from .notifier import Notifier, RecordingNotifier
from .password_hasher import PasswordHasher, StubPasswordHasher
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    RefreshTokenView,
    RotationOutcome,
    RotationResult,
)
from .token_provider import StubTokenProvider, TokenProvider

__all__ = [
    "InMemoryRefreshTokenStore",
    "Notifier",
    "PasswordHasher",
    "RecordingNotifier",
    "RefreshTokenStore",
    "RefreshTokenView",
    "RotationOutcome",
    "RotationResult",
    "StubPasswordHasher",
    "StubTokenProvider",
    "TokenProvider",
]
