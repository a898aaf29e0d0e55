"""User administration endpoints (administrators only)."""

from __future__ import annotations

import uuid

from flask import Blueprint

from pos_backoffice.api.deps import (
    json_response,
    load_body,
    message_response,
    require_admin,
    timing,
    user_service,
)
from pos_backoffice.schemas import (
    StoreRefSchema,
    UserDetailSchema,
    UserSchema,
    UserStoresSchema,
    UserUpdateSchema,
)
from pos_backoffice.services.users.dto import UserStoresIn, UserUpdateIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_detail_schema = UserDetailSchema()
user_update_schema = UserUpdateSchema()
user_stores_schema = UserStoresSchema()
store_ref_list_schema = StoreRefSchema(many=True)


@bp.get("")
@require_admin
@timing
def list_users():
    """Return every user of the tenant."""

    return json_response(user_list_schema.dump(user_service().list()))


@bp.get("/<uuid:user_id>")
@require_admin
@timing
def get_user(user_id: uuid.UUID):
    return json_response(user_detail_schema.dump(user_service().get(user_id)))


@bp.put("/<uuid:user_id>")
@require_admin
@timing
def update_user(user_id: uuid.UUID):
    payload = load_body(user_update_schema)
    user = user_service().update(user_id, UserUpdateIn(**payload))
    return json_response(user_schema.dump(user))


@bp.delete("/<uuid:user_id>")
@require_admin
@timing
def deactivate_user(user_id: uuid.UUID):
    """Soft-deactivate the user; the row is kept."""

    user_service().deactivate(user_id)
    return message_response("user deactivated")


@bp.put("/<uuid:user_id>/stores")
@require_admin
@timing
def update_user_stores(user_id: uuid.UUID):
    """Replace the user's store assignments."""

    payload = load_body(user_stores_schema)
    stores = user_service().update_stores(user_id, UserStoresIn(**payload))
    return json_response(store_ref_list_schema.dump(stores))
