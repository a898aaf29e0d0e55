"""Profile aggregation of the signed-in user."""

from __future__ import annotations

from flask import Blueprint

from pos_backoffice.api.deps import auth_service, current_access, json_response, require_auth, timing
from pos_backoffice.schemas import MeSchema

bp = Blueprint("me", __name__)

me_schema = MeSchema()


@bp.get("/me")
@require_auth
@timing
def me():
    """Return profile, roles, permission map and accessible stores."""

    profile = auth_service().get_me(current_access().user_id)
    return json_response(me_schema.dump(profile))
