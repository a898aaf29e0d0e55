"""Construction of the security components and bearer-token error handling.

Everything that signs, hashes or stores credentials is built here once, from
configuration, and kept on ``app.extensions``. Services receive these
collaborators explicitly (keyword injection); nothing reads secrets or cost
parameters from module globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from flask import Flask, current_app, request

from pos_backoffice.core.errors import Unauthorized
from pos_backoffice.core.extensions import jwt
from pos_backoffice.infra.db.sqlalchemy_refresh_token_store import SQLAlchemyRefreshTokenStore
from pos_backoffice.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from pos_backoffice.infra.notifications.logging_notifier import LoggingNotifier
from pos_backoffice.infra.security.argon2_password_hasher import Argon2PasswordHasher
from pos_backoffice.services._shared.ports import (
    Notifier,
    PasswordHasher,
    RefreshTokenStore,
    TokenProvider,
)

log = logging.getLogger(__name__)

EXTENSION_KEY = "pos_security"

MSG_MISSING_HEADER = "missing authorization header"
MSG_BAD_HEADER = "invalid authorization header format"
MSG_BAD_TOKEN = "invalid or expired token"


@dataclass(frozen=True, slots=True)
class SecurityComponents:
    """
    Immutable bundle of credential collaborators and lifetimes.

    :ivar password_hasher: Argon2id hasher configured from ``ARGON2_*``.
    :ivar token_provider: HS256 access-token issuer.
    :ivar refresh_store: Persistent refresh-token store.
    :ivar notifier: Hand-off for emailed tokens.
    :ivar refresh_ttl: Lifetime of refresh tokens.
    :ivar email_verification_ttl: Lifetime of email verification tokens.
    :ivar password_reset_ttl: Lifetime of password reset tokens.
    :ivar invitation_ttl: Lifetime of invitations.
    """

    password_hasher: PasswordHasher
    token_provider: TokenProvider
    refresh_store: RefreshTokenStore
    notifier: Notifier
    refresh_ttl: timedelta
    email_verification_ttl: timedelta
    password_reset_ttl: timedelta
    invitation_ttl: timedelta


def build_components(config) -> SecurityComponents:
    """Build the production components from a Flask config mapping."""
    return SecurityComponents(
        password_hasher=Argon2PasswordHasher.from_config(config),
        token_provider=JWTTokenProvider(access_ttl=config["JWT_ACCESS_TOKEN_EXPIRES"]),
        refresh_store=SQLAlchemyRefreshTokenStore(),
        notifier=LoggingNotifier(app_url=config["APP_URL"], sender=config["MAIL_FROM"]),
        refresh_ttl=config["JWT_REFRESH_TTL"],
        email_verification_ttl=config["EMAIL_VERIFICATION_TTL"],
        password_reset_ttl=config["PASSWORD_RESET_TTL"],
        invitation_ttl=config["INVITATION_TTL"],
    )


def get_components(app: Flask | None = None) -> SecurityComponents:
    """Return the components registered on ``app`` (or the current app)."""
    target = app or current_app
    return target.extensions[EXTENSION_KEY]


def set_components(app: Flask, components: SecurityComponents) -> None:
    """Replace the registered components (tests swap in doubles this way)."""
    app.extensions[EXTENSION_KEY] = components


def _header_is_well_formed() -> bool:
    parts = request.headers.get("Authorization", "").split()
    return len(parts) == 2 and parts[0].lower() == "bearer"


def init_app(app: Flask) -> None:
    """
    Register the security components and the flask-jwt-extended callbacks.

    Notes
    -----
    Every bearer failure becomes a 401 in the API error shape. Invalid,
    expired, malformed and wrong-algorithm tokens share one message so the
    caller cannot tell them apart.
    """
    if app.config.get("JWT_SECRET_KEY") in (None, "", "CHANGE_ME_JWT") and not app.testing:
        log.warning("JWT_SECRET_KEY is not set; using an insecure development secret")

    set_components(app, build_components(app.config))

    @jwt.unauthorized_loader
    def _unauthorized(reason: str):
        if "Authorization" not in request.headers:
            message = MSG_MISSING_HEADER
        else:
            message = MSG_BAD_HEADER
        return Unauthorized(message).to_response()

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        log.info("rejected bearer token: %s", reason)
        message = MSG_BAD_TOKEN if _header_is_well_formed() else MSG_BAD_HEADER
        return Unauthorized(message).to_response()

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return Unauthorized(MSG_BAD_TOKEN).to_response()

    @jwt.token_verification_failed_loader
    def _verification_failed(jwt_header, jwt_payload):
        return Unauthorized(MSG_BAD_TOKEN).to_response()

    @jwt.user_lookup_error_loader
    def _user_lookup_error(jwt_header, jwt_payload):
        return Unauthorized(MSG_BAD_TOKEN).to_response()

    @jwt.needs_fresh_token_loader
    def _needs_fresh(jwt_header, jwt_payload):
        return Unauthorized(MSG_BAD_TOKEN).to_response()

    @jwt.revoked_token_loader
    def _revoked(jwt_header, jwt_payload):
        return Unauthorized(MSG_BAD_TOKEN).to_response()

    log.debug("security components ready", extra={"event": "security.init"})
