"""Units of Work over the Flask-SQLAlchemy session: one read-write, one read-only."""

from __future__ import annotations

from contextlib import suppress

from flask import current_app
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction, scoped_session

from pos_backoffice.core.extensions import db
from pos_backoffice.repositories import (
    EmailVerificationRepository,
    FeatureRepository,
    InvitationRepository,
    PasswordResetRepository,
    RefreshTokenRepository,
    RolePermissionRepository,
    RoleRepository,
    StoreRepository,
    TenantRepository,
    UserRepository,
    UserRoleRepository,
    UserStoreRepository,
)
from pos_backoffice.uow.base import UnitOfWork

# Dialects that understand ``SET TRANSACTION`` directives
_SET_TRANSACTION_DIALECTS = ("postgresql", "mysql", "mariadb")


def _concrete_session(session) -> Session:
    """Return the thread-local ``Session`` behind a ``scoped_session``."""
    if isinstance(session, scoped_session):
        return session()
    return session


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.tenants = TenantRepository(session=self.session)
        self.stores = StoreRepository(session=self.session)
        self.users = UserRepository(session=self.session)
        self.features = FeatureRepository(session=self.session)
        self.roles = RoleRepository(session=self.session)
        self.role_permissions = RolePermissionRepository(session=self.session)
        self.user_roles = UserRoleRepository(session=self.session)
        self.user_stores = UserStoreRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)
        self.email_verifications = EmailVerificationRepository(session=self.session)
        self.password_resets = PasswordResetRepository(session=self.session)
        self.invitations = InvitationRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    Every repository shares one session, so a use case either commits all of
    its writes or none of them.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on the first statement
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Query-side Unit of Work: reads only, always rolled back.

    Used for ``/me``, listings and the access context loaded on every
    authenticated request. While the scope is open, two guards are active:

    * a ``before_flush`` hook on the session rejecting pending ORM changes;
    * a ``before_cursor_execute`` hook on the connection rejecting any
      statement that starts with a write or DDL keyword.

    On PostgreSQL and MySQL the transaction is also declared read-only with
    ``SET TRANSACTION``. If the session already has a transaction open, the
    scope joins it: the guards still apply, but no directive is issued and
    nothing is rolled back on exit.

    :param isolation_level: Level sent with ``SET TRANSACTION ISOLATION LEVEL``.
    :param enforce_db_readonly: Also send ``SET TRANSACTION READ ONLY``.
    """

    BLOCKED_KEYWORDS = frozenset(
        {
            "insert",
            "update",
            "delete",
            "merge",
            "replace",
            "create",
            "alter",
            "drop",
            "truncate",
            "grant",
            "revoke",
        }
    )
    ISOLATION_LEVELS = ("READ UNCOMMITTED", "READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE")

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._owned: SessionTransaction | None = None
        self._hooks: list[tuple[object, str, object]] = []

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._owned = None
        if not _concrete_session(self.session).in_transaction():
            self._owned = self.session.begin()

        connection = self.session.connection()
        self._guard(connection)
        if self._owned is not None and connection.dialect.name in _SET_TRANSACTION_DIALECTS:
            self._declare_read_only()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned is not None:
                self.session.rollback()
        finally:
            self._owned = None
            self._unguard()

    def commit(self) -> None:
        """
        :raises RuntimeError: Always; this scope never writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ------------------------------ Internals ---------------------------------

    def _declare_read_only(self) -> None:
        try:
            if self.isolation_level:
                level = self.isolation_level.upper().strip()
                if level not in self.ISOLATION_LEVELS:
                    current_app.logger.warning("uow.unknown_isolation_level %s", level)
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            # Guards stay in place even if the server rejects the directives
            current_app.logger.warning("uow.read_only_directive_failed %s", exc)

    def _guard(self, connection: Connection) -> None:
        def reject_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

        def reject_writes(conn, cursor, statement, parameters, context, executemany):
            keyword = (statement or "").lstrip().split(None, 1)[:1]
            if keyword and keyword[0].lower() in self.BLOCKED_KEYWORDS:
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {keyword[0].upper()}"
                )

        # The concrete Session, not the process-wide scoped registry
        hooks = [
            (_concrete_session(self.session), "before_flush", reject_flush),
            (connection, "before_cursor_execute", reject_writes),
        ]
        for target, name, fn in hooks:
            event.listen(target, name, fn)
        self._hooks = hooks

    def _unguard(self) -> None:
        hooks, self._hooks = self._hooks, []
        for target, name, fn in hooks:
            with suppress(InvalidRequestError):
                event.remove(target, name, fn)
