"""Shared API helpers: authentication, authorization guards and service wiring."""

from __future__ import annotations

import functools
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from marshmallow import Schema

from pos_backoffice.core.errors import Forbidden, Unauthorized
from pos_backoffice.core.logger import ensure_request_id
from pos_backoffice.core.security import MSG_BAD_TOKEN, get_components
from pos_backoffice.services import (
    AccessContext,
    AuthorizationService,
    AuthService,
    InvitationService,
    RoleService,
    ServiceContext,
    StoreService,
    UserService,
)
from pos_backoffice.services.auth.dto import AuthTokenConfig

F = TypeVar("F", bound=Callable[..., Any])

MSG_FORBIDDEN = "insufficient permissions"


# --------------------------------------------------------------------------- #
# Request helpers
# --------------------------------------------------------------------------- #


def load_body(schema: Schema) -> dict[str, Any]:
    """Validate the JSON body with ``schema``; failures become 422 responses."""
    return schema.load(request.get_json(silent=True) or {})


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def message_response(message: str, *, status: int = 200) -> Response:
    return json_response({"message": message}, status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Authentication / authorization
# --------------------------------------------------------------------------- #


def _claims_identity() -> tuple[uuid.UUID, uuid.UUID, str]:
    claims = get_jwt() or {}
    try:
        user_id = uuid.UUID(str(claims["user_id"]))
        tenant_id = uuid.UUID(str(claims["tenant_id"]))
    except (KeyError, ValueError) as exc:
        raise Unauthorized(MSG_BAD_TOKEN) from exc
    return user_id, tenant_id, str(claims.get("email", ""))


def current_access() -> AccessContext:
    """Return the access context loaded by :func:`require_auth`."""
    access = g.get("access")
    if access is None:
        raise RuntimeError("current_access() used outside of a require_auth handler")
    return access


def require_auth(func: F) -> F:
    """
    Verify the bearer token and attach the caller's :class:`AccessContext`.

    The permission map and store scope are loaded fresh on every request and
    stored on ``flask.g.access``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        user_id, tenant_id, email = _claims_identity()
        g.access = AuthorizationService().load_context(
            user_id=user_id, tenant_id=tenant_id, email=email
        )
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_permission(slug: str, action: str) -> Callable[[F], F]:
    """Ensure the caller holds ``action`` on feature ``slug`` (403 otherwise)."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def guarded(*args: Any, **kwargs: Any):
            if not current_access().has_permission(slug, action):
                raise Forbidden(MSG_FORBIDDEN)
            return func(*args, **kwargs)

        return require_auth(guarded)  # type: ignore[return-value]

    return decorator


def require_admin(func: F) -> F:
    """Ensure the caller holds the tenant's system-default role (403 otherwise)."""

    @functools.wraps(func)
    def guarded(*args: Any, **kwargs: Any):
        if not current_access().is_admin:
            raise Forbidden(MSG_FORBIDDEN)
        return func(*args, **kwargs)

    return require_auth(guarded)  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def service_context() -> ServiceContext:
    """Build the request-scoped context from the authenticated caller."""
    access = current_access()
    return ServiceContext(
        actor_id=access.user_id,
        tenant_id=access.tenant_id,
        request_id=ensure_request_id(),
    )


def auth_service() -> AuthService:
    components = get_components()
    return AuthService(
        password_hasher=components.password_hasher,
        token_provider=components.token_provider,
        refresh_store=components.refresh_store,
        notifier=components.notifier,
        token_cfg=AuthTokenConfig(
            refresh_expires=components.refresh_ttl,
            email_verification_expires=components.email_verification_ttl,
            password_reset_expires=components.password_reset_ttl,
        ),
    )


def role_service() -> RoleService:
    return RoleService(ctx=service_context())


def invitation_service() -> InvitationService:
    components = get_components()
    return InvitationService(
        notifier=components.notifier,
        ttl=components.invitation_ttl,
        ctx=service_context(),
    )


def store_service() -> StoreService:
    return StoreService(ctx=service_context())


def user_service() -> UserService:
    return UserService(ctx=service_context())
