# pos_backoffice/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

from pos_backoffice.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Signing uses ``JWT_SECRET_KEY`` with ``JWT_ALGORITHM`` (HS256); decoding
    only accepts ``JWT_DECODE_ALGORITHMS`` so a token signed with another
    algorithm (``none``, RS256 with the secret as a public key...) is
    rejected. Verification is stateless.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    access_ttl: timedelta = timedelta(minutes=15)

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        return cast(
            str,
            _create_access(
                identity=str(identity),
                additional_claims=dict(additional_claims or {}),
                expires_delta=expires_delta or self.access_ttl,
            ),
        )

    def decode(self, token: str) -> dict[str, Any]:
        from flask_jwt_extended import decode_token

        return cast(dict[str, Any], decode_token(token))
