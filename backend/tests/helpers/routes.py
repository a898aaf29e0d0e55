"""Routes mounted on the test application only."""

from __future__ import annotations

from flask import Blueprint

from pos_backoffice.api.deps import current_access, json_response, require_permission

GATED_PREFIX = "/api/v1/_gated"

bp = Blueprint("gated", __name__)


@bp.get("/products")
@require_permission("master-data.product", "read")
def read_products():
    return json_response({"user_id": str(current_access().user_id)})


@bp.delete("/products")
@require_permission("master-data.product", "delete")
def delete_products():
    return json_response({"deleted": True})
