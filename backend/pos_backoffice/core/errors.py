"""HTTP error rendering for the API.

All failures leave the service with the same JSON body, served as
``application/problem+json``::

    {
      "error": "invalid email or password",
      "code": "unauthorized",
      "status": 401,
      "title": "Unauthorized",
      "type": "about:blank",
      "instance": "/api/v1/auth/login",
      "request_id": "...",
      "details": {"email": "Not a valid email address."}
    }

``error``, ``code`` and the optional ``details`` are what clients act on; the
remaining RFC 7807 members are informational. Database, driver and internal
messages are never echoed back.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, has_request_context, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from pos_backoffice.core.logger import ensure_request_id
from pos_backoffice.services._shared.errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    ValidationError,
)

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "validation_error",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


def flatten_messages(messages: Any, prefix: str = "") -> dict[str, str]:
    """
    Reduce marshmallow's nested error messages to ``{path: message}``.

    Nested fields use dotted paths (``permissions.0.actions``) and only the
    first message of each field is kept.
    """
    if isinstance(messages, dict):
        flat: dict[str, str] = {}
        for key, value in messages.items():
            flat.update(flatten_messages(value, f"{prefix}.{key}" if prefix else str(key)))
        return flat
    if isinstance(messages, list | tuple):
        if messages and all(isinstance(m, str) for m in messages):
            return {prefix or "_schema": messages[0]}
        flat = {}
        for item in messages:
            flat.update(flatten_messages(item, prefix))
        return flat
    if messages is None:
        return {}
    return {prefix or "_schema": str(messages)}


def problem_response(
    status: int, code: str, message: str, details: dict[str, Any] | None = None
) -> Response:
    """Render the error body for ``status`` with a correlation id."""
    body: dict[str, Any] = {
        "error": message,
        "code": code,
        "status": int(status),
        "title": HTTPStatus(status).phrase,
        "type": "about:blank",
        "instance": request.path if has_request_context() else None,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    response = jsonify(body)
    response.status_code = int(status)
    response.mimetype = PROBLEM_MIMETYPE
    return response


class APIError(Exception):
    """
    Error raised by the HTTP layer and rendered as a problem response.

    :param message: Client-safe description.
    :param status_code: HTTP status, 400 unless given.
    :param code: Stable snake_case identifier.
    :param details: Optional ``{field: message}`` mapping.
    """

    status_code: int = HTTPStatus.BAD_REQUEST
    code: str = "bad_request"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = int(status_code)
        if code is not None:
            self.code = code
        self.details = details or {}

    def to_response(self) -> Response:
        return problem_response(self.status_code, self.code, self.message, self.details or None)


class NotFound(APIError):
    """Missing resource, or one owned by another tenant."""

    status_code = HTTPStatus.NOT_FOUND
    code = "not_found"


class Conflict(APIError):
    status_code = HTTPStatus.CONFLICT
    code = "conflict"


class Unauthorized(APIError):
    status_code = HTTPStatus.UNAUTHORIZED
    code = "unauthorized"


class Forbidden(APIError):
    status_code = HTTPStatus.FORBIDDEN
    code = "forbidden"


class UnprocessableEntity(APIError):
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    code = "validation_error"


_SERVICE_ERROR_TYPES: tuple[tuple[type[ServiceError], type[APIError]], ...] = (
    (NotFoundError, NotFound),
    (ConflictError, Conflict),
    (UnauthorizedError, Unauthorized),
    (ForbiddenError, Forbidden),
)


def from_service_error(exc: ServiceError) -> APIError:
    """
    Translate a service-layer error into the HTTP error it stands for.

    Internal errors keep their message out of the response.
    """
    if isinstance(exc, InternalError):
        return APIError(
            "internal server error",
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
        )
    if isinstance(exc, ValidationError):
        return UnprocessableEntity(str(exc), details=exc.fields or None)
    for service_type, api_type in _SERVICE_ERROR_TYPES:
        if isinstance(exc, service_type):
            return api_type(str(exc))
    return APIError(str(exc) or "bad request")


def _log_error(kind: str, status: int, code: str, message: str, *, exc_info: Any = None) -> None:
    level = logging.ERROR if status >= 500 else logging.WARNING
    log.log(
        level,
        "%s: code=%s status=%s msg=%s request_id=%s",
        kind,
        code,
        status,
        message,
        ensure_request_id(),
        exc_info=exc_info if status >= 500 else None,
    )


def init_app(app: Flask) -> None:
    """Register the error handlers; 5xx are logged with tracebacks, 4xx as warnings."""

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        _log_error("APIError", err.status_code, err.code, err.message)
        return err.to_response()

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        api_err = from_service_error(err)
        _log_error("ServiceError", api_err.status_code, api_err.code, str(err), exc_info=err)
        return api_err.to_response()

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        _log_error("ValidationError", 422, "validation_error", "validation failed")
        return problem_response(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "validation failed",
            flatten_messages(err.messages),
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = STATUS_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND and has_request_context():
            message = f"route '{request.path}' not found"
        elif status == HTTPStatus.TOO_MANY_REQUESTS:
            message = "too many requests"
        else:
            message = (err.description or code.replace("_", " ")).strip()
        _log_error("HTTPException", status, code, message)
        response = problem_response(status, code, message)
        # Retry-After and the X-RateLimit-* headers survive
        for header, value in err.get_headers():
            if header.lower() != "content-type":
                response.headers.setdefault(header, value)
        return response

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        _log_error("IntegrityError", 409, "conflict", "constraint violated")
        log.debug("integrity.detail", exc_info=err)
        return problem_response(HTTPStatus.CONFLICT, "conflict", "resource already exists")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        _log_error("OperationalError", 503, "service_unavailable", str(err.orig), exc_info=err)
        return problem_response(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "service_unavailable",
            "service temporarily unavailable",
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        _log_error("Unhandled", 500, "internal_server_error", type(err).__name__, exc_info=err)
        return problem_response(
            HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "internal server error"
        )


__all__ = [
    "APIError",
    "Conflict",
    "Forbidden",
    "NotFound",
    "Unauthorized",
    "UnprocessableEntity",
    "flatten_messages",
    "from_service_error",
    "init_app",
    "problem_response",
]
