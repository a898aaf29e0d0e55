"""Idempotent seed of the static feature catalog.

Feature ids are stable across environments so that permission grants can be
moved between databases and referenced from client code. Re-running the seed
updates names, actions and ordering in place; it never deletes rows.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import Session

from pos_backoffice.models import Feature

LOGGER = logging.getLogger(__name__)

CRUD = ["read", "create", "edit", "delete"]


def _fid(n: int) -> uuid.UUID:
    return uuid.UUID(f"10000000-0000-0000-0000-{n:012d}")


MASTER_DATA_ID = _fid(1)
REPORTING_ID = _fid(3)
PURCHASE_ID = _fid(5)

FEATURE_FIXTURES: list[dict[str, Any]] = [
    {"id": MASTER_DATA_ID, "parent_id": None, "name": "Master Data",
     "slug": "master-data", "module": "master-data", "actions": [], "sort_order": 1},
    {"id": _fid(2), "parent_id": MASTER_DATA_ID, "name": "Product",
     "slug": "master-data.product", "module": "master-data", "actions": CRUD, "sort_order": 2},
    {"id": REPORTING_ID, "parent_id": None, "name": "Reporting",
     "slug": "reporting", "module": "reporting", "actions": [], "sort_order": 3},
    {"id": _fid(4), "parent_id": REPORTING_ID, "name": "Sales",
     "slug": "reporting.sales", "module": "reporting", "actions": ["read"], "sort_order": 4},
    {"id": PURCHASE_ID, "parent_id": None, "name": "Purchase",
     "slug": "purchase", "module": "purchase", "actions": [], "sort_order": 5},
    {"id": _fid(6), "parent_id": PURCHASE_ID, "name": "Product",
     "slug": "purchase.product", "module": "purchase", "actions": CRUD, "sort_order": 6},
    {"id": _fid(10), "parent_id": MASTER_DATA_ID, "name": "Category",
     "slug": "master-data.category", "module": "master-data", "actions": CRUD, "sort_order": 7},
    {"id": _fid(11), "parent_id": MASTER_DATA_ID, "name": "Unit",
     "slug": "master-data.unit", "module": "master-data", "actions": CRUD, "sort_order": 8},
    {"id": _fid(12), "parent_id": MASTER_DATA_ID, "name": "Variant",
     "slug": "master-data.variant", "module": "master-data", "actions": CRUD, "sort_order": 9},
    {"id": _fid(13), "parent_id": MASTER_DATA_ID, "name": "Warehouse",
     "slug": "master-data.warehouse", "module": "master-data", "actions": CRUD, "sort_order": 10},
    {"id": _fid(14), "parent_id": MASTER_DATA_ID, "name": "Supplier",
     "slug": "master-data.supplier", "module": "master-data", "actions": CRUD, "sort_order": 11},
    {"id": _fid(15), "parent_id": PURCHASE_ID, "name": "Order",
     "slug": "purchase.order", "module": "purchase", "actions": CRUD, "sort_order": 12},
    {"id": _fid(16), "parent_id": PURCHASE_ID, "name": "Delivery",
     "slug": "purchase.delivery", "module": "purchase",
     "actions": ["read", "create", "edit"], "sort_order": 13},
]


def upsert_features(session: Session) -> dict[str, int]:
    """
    Insert or update every catalog row; the caller owns the transaction.

    Parents come before their children in :data:`FEATURE_FIXTURES`, so a
    flush after each row keeps the self-referencing FK satisfied.

    :returns: ``{"created": n, "existing": m}``.
    """
    counters = {"created": 0, "existing": 0}
    for fixture in FEATURE_FIXTURES:
        feature = session.get(Feature, fixture["id"])
        if feature is None:
            session.add(Feature(**{**fixture, "actions": list(fixture["actions"])}))
            counters["created"] += 1
        else:
            for key in ("parent_id", "name", "slug", "module", "sort_order"):
                setattr(feature, key, fixture[key])
            feature.actions = list(fixture["actions"])
            counters["existing"] += 1
        session.flush()
        LOGGER.debug("seeded feature", extra={"slug": fixture["slug"]})
    return counters


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Seed the feature catalog in its own transaction."""
    if verbose:
        LOGGER.info("Seeding feature catalog...")
    session = database.session
    try:
        counters = upsert_features(session)
        session.commit()
    except Exception:
        session.rollback()
        raise
    return {"features": counters}


__all__ = ["FEATURE_FIXTURES", "upsert_features", "run_all"]
