"""Feature catalog endpoint."""

from __future__ import annotations

from flask import Blueprint

from pos_backoffice.api.deps import json_response, require_auth, role_service, timing
from pos_backoffice.schemas import FeatureNodeSchema

bp = Blueprint("features", __name__)

feature_tree_schema = FeatureNodeSchema(many=True)


@bp.get("")
@require_auth
@timing
def list_features():
    """Return the feature catalog as a tree."""

    return json_response(feature_tree_schema.dump(role_service().list_features()))
