"""Base service class and request-scoped context shared by application services."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from pos_backoffice.services._shared.errors import NotFoundError
from pos_backoffice.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Who is calling, on behalf of which tenant.

    :param actor_id: Id of the authenticated user, if any.
    :param tenant_id: The caller's tenant; every tenant-owned query filters on it.
    :param request_id: Id echoed in logs and error bodies.
    """

    actor_id: uuid.UUID | None = None
    tenant_id: uuid.UUID | None = None
    request_id: str | None = None


class BaseService:
    """
    Shared plumbing for the use-case services.

    Each public method opens its own Unit of Work: :meth:`rw_uow` for writes,
    :meth:`ro_uow` for queries. Services raise the errors of
    :mod:`pos_backoffice.services._shared.errors` and know nothing of HTTP.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Query scope; writes raise and the transaction is always rolled back."""
        return SQLAlchemyReadOnlyUnitOfWork(isolation_level=self.DEFAULT_READ_ISOLATION)

    def require_tenant(self) -> uuid.UUID:
        """
        Return the caller's tenant id.

        :raises RuntimeError: If the service was built without a tenant context;
            this is a wiring bug, never a client error.
        """
        if self.ctx.tenant_id is None:
            raise RuntimeError(f"{type(self).__name__} requires a tenant-scoped context.")
        return self.ctx.tenant_id

    @staticmethod
    def found(entity: str, row, key: object = None):
        """Return ``row`` or raise :class:`NotFoundError` for ``entity``."""
        if row is None:
            raise NotFoundError(entity, key)
        return row
