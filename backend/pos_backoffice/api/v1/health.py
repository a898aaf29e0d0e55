"""Liveness and database reachability probe (no authentication)."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from pos_backoffice.api.deps import json_response, timing
from pos_backoffice.core.extensions import db

bp = Blueprint("health", __name__)


def _database_reachable() -> bool:
    try:
        db.session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("health.database_unreachable")
        return False
    finally:
        db.session.rollback()


@bp.get("/health")
@timing
def healthcheck():
    """``200`` with the build version, or ``503`` when the database is down."""
    database_ok = _database_reachable()
    return json_response(
        {
            "status": "ok",
            "db": "ok" if database_ok else "fail",
            "version": current_app.config.get("APP_VERSION", "dev"),
        },
        status=200 if database_ok else 503,
    )
