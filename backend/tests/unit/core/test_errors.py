"""Unit tests for the service-to-HTTP error mapping."""

from __future__ import annotations

import pytest

from pos_backoffice.core.errors import (
    APIError,
    Conflict,
    Forbidden,
    NotFound,
    Unauthorized,
    UnprocessableEntity,
    flatten_messages,
    from_service_error,
)
from pos_backoffice.services._shared.errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "api_type", "status"),
    [
        (NotFoundError("Role", "abc"), NotFound, 404),
        (ConflictError("Store", "a store with this name already exists"), Conflict, 409),
        (UnauthorizedError("invalid email or password"), Unauthorized, 401),
        (ForbiddenError("insufficient permissions"), Forbidden, 403),
        (ValidationError("feature not found: x"), UnprocessableEntity, 422),
    ],
)
def test_service_errors_map_to_status(error, api_type, status):
    api_error = from_service_error(error)

    assert isinstance(api_error, api_type)
    assert api_error.status_code == status
    assert api_error.message == str(error)


def test_not_found_message_never_contains_the_key():
    error = NotFoundError("Role", "3f0c4d5e-secret-id")

    assert str(error) == "role not found"


def test_internal_error_message_is_not_leaked():
    api_error = from_service_error(InternalError("argon2 backend exploded"))

    assert isinstance(api_error, APIError)
    assert api_error.status_code == 500
    assert api_error.message == "internal server error"


def test_validation_fields_become_details():
    api_error = from_service_error(
        ValidationError("validation failed", {"tenant_name": "must contain a letter"})
    )

    assert api_error.details == {"tenant_name": "must contain a letter"}


def test_flatten_messages_uses_dotted_paths_and_first_message():
    messages = {
        "email": ["Not a valid email address.", "Longer than maximum length 255."],
        "permissions": {0: {"actions": ["Shorter than minimum length 1."]}},
    }

    assert flatten_messages(messages) == {
        "email": "Not a valid email address.",
        "permissions.0.actions": "Shorter than minimum length 1.",
    }
