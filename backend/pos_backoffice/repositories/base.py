"""Generic repository base for SQLAlchemy 2.x.

Repositories are persistence-only:

* They never commit or roll back; the Unit of Work owns the transaction.
* Tenant-owned rows are read through :meth:`BaseRepository.get_in_tenant`
  and :meth:`BaseRepository.list_in_tenant`, so a row of another tenant is
  indistinguishable from a missing one.
* Updates go through a per-repository whitelist (``_updatable_fields``);
  there is no mass assignment.
* Listings are ordered through a whitelist of sort keys with the primary key
  as final tiebreaker, so results are deterministic.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from pos_backoffice.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Turn ``["-created_at", "name"]`` into ``[("created_at", True), ("name", False)]``."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        descending = token.startswith("-")
        name = token.lstrip("-").strip()
        if name:
            parsed.append((name, descending))
    return parsed


class BaseRepository(Generic[E]):
    """
    Persistence helpers for one mapped class.

    Subclasses set ``model`` and may override ``_sortable_fields``,
    ``_default_sort``, ``_updatable_fields`` and ``_default_eagerload``.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session of the enclosing Unit of Work; falls back to
            the Flask-scoped ``db.session``.
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        return stmt

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        return cast(InstrumentedAttribute[Any], self.model.id)  # type: ignore[attr-defined]

    def _tenant_attr(self) -> InstrumentedAttribute[Any]:
        """
        :raises RuntimeError: If the model has no ``tenant_id`` column.
        """
        attr = getattr(self.model, "tenant_id", None)
        if attr is None:
            raise RuntimeError(f"{self.model.__name__} is not tenant-scoped.")
        return cast(InstrumentedAttribute[Any], attr)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _default_sort(self) -> list[str]:
        return []

    def _updatable_fields(self) -> set[str]:
        return set()

    def _ordered(self, stmt: Select[Any], sort: Iterable[str] | None) -> Select[Any]:
        # Unknown keys are ignored; the PK always breaks ties
        columns = self._sortable_fields()
        for name, descending in parse_sort_tokens(sort or self._default_sort()):
            column = columns.get(name)
            if column is not None:
                stmt = stmt.order_by(column.desc() if descending else column.asc())
        return stmt.order_by(self._pk_attr().asc())

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so defaults and constraints apply."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        stmt = self._default_eagerload(select(self.model).where(self._pk_attr() == entity_id))
        return cast("E | None", self.session.execute(stmt).scalars().first())

    def get_in_tenant(self, tenant_id: uuid.UUID, entity_id: Any) -> E | None:
        """
        Fetch an entity by primary key only when ``tenant_id`` owns it.

        :returns: The entity, or ``None`` when missing or owned by another tenant.
        """
        stmt = select(self.model).where(
            self._pk_attr() == entity_id, self._tenant_attr() == tenant_id
        )
        return cast(
            "E | None", self.session.execute(self._default_eagerload(stmt)).scalars().first()
        )

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    def update(self, instance: E, **fields: Any) -> E:
        """
        Assign whitelisted fields through ``setattr`` (so ``@validates`` hooks
        run) and flush.

        :raises ValueError: For a key outside ``_updatable_fields``.
        """
        allowed = self._updatable_fields()
        rejected = sorted(k for k in fields if k not in allowed)
        if rejected:
            raise ValueError(f"Unknown or non-updatable fields: {rejected}")
        for key, value in fields.items():
            setattr(instance, key, value)
        self.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def list(self, *, sort: Iterable[str] | None = None) -> list[E]:
        stmt = self._ordered(self._default_eagerload(select(self.model)), sort)
        return cast("list[E]", list(self.session.execute(stmt).scalars().all()))

    def list_in_tenant(
        self, tenant_id: uuid.UUID, *, sort: Iterable[str] | None = None
    ) -> list[E]:
        """List the entities owned by ``tenant_id``, ordered by ``sort`` or the default."""
        stmt = select(self.model).where(self._tenant_attr() == tenant_id)
        stmt = self._ordered(self._default_eagerload(stmt), sort)
        return cast("list[E]", list(self.session.execute(stmt).scalars().all()))
