"""Store endpoints: reads follow the caller's store scope, writes need admin."""

from __future__ import annotations

import uuid

from flask import Blueprint

from pos_backoffice.api.deps import (
    current_access,
    json_response,
    load_body,
    message_response,
    require_admin,
    require_auth,
    store_service,
    timing,
)
from pos_backoffice.schemas import StoreCreateSchema, StoreSchema, StoreUpdateSchema
from pos_backoffice.services.stores.dto import StoreCreateIn, StoreUpdateIn

bp = Blueprint("stores", __name__)

store_schema = StoreSchema()
store_list_schema = StoreSchema(many=True)
store_create_schema = StoreCreateSchema()
store_update_schema = StoreUpdateSchema()


@bp.get("")
@require_auth
@timing
def list_stores():
    """Return the stores visible to the caller."""

    return json_response(store_list_schema.dump(store_service().list(current_access())))


@bp.get("/<uuid:store_id>")
@require_auth
@timing
def get_store(store_id: uuid.UUID):
    store = store_service().get(store_id, current_access())
    return json_response(store_schema.dump(store))


@bp.post("")
@require_admin
@timing
def create_store():
    payload = load_body(store_create_schema)
    store = store_service().create(StoreCreateIn(**payload))
    return json_response(store_schema.dump(store), status=201)


@bp.put("/<uuid:store_id>")
@require_admin
@timing
def update_store(store_id: uuid.UUID):
    payload = load_body(store_update_schema)
    store = store_service().update(store_id, StoreUpdateIn(**payload))
    return json_response(store_schema.dump(store))


@bp.delete("/<uuid:store_id>")
@require_admin
@timing
def deactivate_store(store_id: uuid.UUID):
    store_service().deactivate(store_id)
    return message_response("store deactivated")
