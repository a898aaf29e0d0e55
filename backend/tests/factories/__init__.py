"""Factory Boy base wired to the per-test transactional session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session the ``session`` fixture hands to factories."""

    _session = None

    @classmethod
    def set(cls, session) -> None:
        cls._session = session

    @classmethod
    def get(cls):
        """Return the current test session.

        Raises
        ------
        RuntimeError
            When a factory runs outside a test using the ``session`` fixture.
        """
        if cls._session is None:
            raise RuntimeError("factory used without the 'session' fixture")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Persist through :class:`SQLAlchemySession` and commit every object."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        # Committing only releases a SAVEPOINT; a Unit of Work rolling back
        # later in the test cannot discard the fixture rows.
        sqlalchemy_session_persistence = "commit"
