"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside an outer transaction on a shared connection to an
in-memory SQLite database. The session joins that connection in
``create_savepoint`` mode, so the Unit of Work may commit and roll back
freely while every change is still discarded at the end of the test.
"""

from __future__ import annotations

import dataclasses
import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from pos_backoffice.core.config import TestingConfig
from pos_backoffice.core.extensions import db as _db
from pos_backoffice.core.security import get_components, set_components
from pos_backoffice.factory import create_app
from pos_backoffice.seeds.features import upsert_features
from pos_backoffice.services._shared.ports import RecordingNotifier
from tests.helpers import routes as gated_routes


def _enable_sqlite_savepoints(engine) -> None:
    """Take BEGIN away from pysqlite (so SAVEPOINTs nest) and enforce foreign keys."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # pragma: no cover - driver hook
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):  # pragma: no cover - driver hook
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def app():
    """Application built from :class:`TestingConfig`, ignoring ``DATABASE_URL``."""
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig)
    app.register_blueprint(gated_routes.bp, url_prefix=gated_routes.GATED_PREFIX)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Schema created once; the app context stays pushed until the session ends."""
    with app.app_context():
        _enable_sqlite_savepoints(_db.engine)
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Single connection carrying every test's outer transaction."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """
    Scoped session whose commits only release SAVEPOINTs.

    ``db.session`` is swapped for it, so services and the test client see the
    same data; the outer transaction is rolled back afterwards.
    """
    outer = connection.begin()
    factory = sessionmaker(
        bind=connection,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    scoped = scoped_session(factory)

    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        outer.rollback()


@pytest.fixture(scope="session")
def faker():
    from faker import Faker

    Faker.seed(20240)
    return Faker()


@pytest.fixture()
def freeze_time():
    """Return :func:`freezegun.freeze_time`, defaulting to 2024-01-01.

    Examples
    --------
    >>> def test_link_expiry(freeze_time):
    ...     with freeze_time(utcnow() + timedelta(hours=2)):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target=None):
        return _freeze_time(target or "2024-01-01")

    return _factory


@pytest.fixture(autouse=True)
def _factories_session(session):
    """Factories persist through the per-test session."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


@pytest.fixture()
def features(session):
    """Seed the feature catalog inside the test transaction."""
    upsert_features(session)
    session.commit()


@pytest.fixture()
def notifier(app):
    """Swap the application's notifier for a recording double."""
    original = get_components(app)
    recorder = RecordingNotifier()
    set_components(app, dataclasses.replace(original, notifier=recorder))
    try:
        yield recorder
    finally:
        set_components(app, original)


@pytest.fixture()
def client(app, session, notifier):
    return app.test_client()
