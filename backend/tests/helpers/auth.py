"""Authentication helpers for tests."""

from __future__ import annotations

from datetime import timedelta

from flask_jwt_extended import create_access_token


def issue_token(user, expires_delta: timedelta | None = None) -> str:
    """Generate an access token carrying the claims the API expects.

    Parameters
    ----------
    user:
        Object exposing ``id``, ``tenant_id`` and ``email``.
    expires_delta:
        Optional expiry delta. If ``None``, the configured lifetime is used.

    Returns
    -------
    str
        Encoded JWT string.
    """
    claims = {"user_id": str(user.id), "tenant_id": str(user.tenant_id), "email": user.email}
    return create_access_token(
        identity=str(user.id), additional_claims=claims, expires_delta=expires_delta
    )


def expired_token(user) -> str:
    """Return an already expired access token for ``user``."""
    return issue_token(user, expires_delta=timedelta(seconds=-1))


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
