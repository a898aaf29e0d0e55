"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or HTTP.
They are the stable contract between repositories, adapters and application
services. The translation to HTTP responses is handled once, by
``pos_backoffice/core/errors.py``, so no route special-cases them.

Taxonomy
--------
======================  ======  ==============================================
Error                   Status  Raised for
======================  ======  ==============================================
``ValidationError``     422     Well-formed request that breaks a domain rule.
``UnauthorizedError``   401     Bad credentials, bad/expired/revoked tokens.
``ForbiddenError``      403     Authenticated but not permitted.
``NotFoundError``       404     Missing entity *or* one owned by another tenant.
``ConflictError``       409     Uniqueness violations.
``InternalError``       500     Unexpected storage or crypto failures.
======================  ======  ==============================================
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError mentions the given constraint.
    """
    # PostgreSQL includes the constraint name in the error message
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories, adapters or services.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is missing or belongs to another tenant.

    The public message never includes ``key`` so a cross-tenant probe cannot
    tell "exists elsewhere" from "does not exist".

    :param entity: Entity name (e.g., "Role").
    :type entity: str
    :param key: Identifier or search key (kept for logs).
    :type key: object
    """

    entity: str
    key: object = None

    def __post_init__(self) -> None:
        ServiceError.__init__(self, f"{self.entity.lower()} not found")


@dataclass(eq=False)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Client-safe explanation, used as the public message.
    :type detail: str
    """

    entity: str
    detail: str

    def __post_init__(self) -> None:
        ServiceError.__init__(self, self.detail)


@dataclass(eq=False)
class ValidationError(ServiceError):
    """
    Raised when input is well-formed but violates a domain rule.

    :param detail: Client-safe explanation.
    :type detail: str
    :param fields: Optional ``{field: message}`` breakdown.
    :type fields: dict[str, str]
    """

    detail: str
    fields: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        ServiceError.__init__(self, self.detail)


class UnauthorizedError(ServiceError):
    """Raised when the caller cannot be authenticated."""

    def __init__(self, message: str = "unauthorized") -> None:
        super().__init__(message)


class ForbiddenError(ServiceError):
    """Raised when an authenticated caller is not allowed to act."""

    def __init__(self, message: str = "forbidden") -> None:
        super().__init__(message)


class InternalError(ServiceError):
    """
    Raised for unexpected storage or crypto failures.

    The message is logged server-side; clients only see a generic text.
    Chain the original exception with ``raise ... from exc``.
    """

    def __init__(self, message: str = "internal server error") -> None:
        super().__init__(message)
