"""Role management endpoints (administrators only)."""

from __future__ import annotations

import uuid

from flask import Blueprint

from pos_backoffice.api.deps import (
    json_response,
    load_body,
    message_response,
    require_admin,
    role_service,
    timing,
)
from pos_backoffice.schemas import (
    PermissionSchema,
    PermissionsUpdateSchema,
    RoleSchema,
    RoleWriteSchema,
)
from pos_backoffice.services.roles.dto import PermissionIn, RoleCreateIn, RoleUpdateIn

bp = Blueprint("roles", __name__)

role_schema = RoleSchema()
role_list_schema = RoleSchema(many=True, exclude=("permissions",))
role_write_schema = RoleWriteSchema()
permissions_update_schema = PermissionsUpdateSchema()
permission_list_schema = PermissionSchema(many=True)


@bp.get("")
@require_admin
@timing
def list_roles():
    return json_response(role_list_schema.dump(role_service().list_roles()))


@bp.post("")
@require_admin
@timing
def create_role():
    payload = load_body(role_write_schema)
    role = role_service().create_role(RoleCreateIn(**payload))
    return json_response(role_schema.dump(role), status=201)


@bp.get("/<uuid:role_id>")
@require_admin
@timing
def get_role(role_id: uuid.UUID):
    """Return a role with its permissions."""

    return json_response(role_schema.dump(role_service().get_role(role_id)))


@bp.put("/<uuid:role_id>")
@require_admin
@timing
def update_role(role_id: uuid.UUID):
    payload = load_body(role_write_schema)
    role = role_service().update_role(role_id, RoleUpdateIn(**payload))
    return json_response(role_schema.dump(role))


@bp.delete("/<uuid:role_id>")
@require_admin
@timing
def delete_role(role_id: uuid.UUID):
    role_service().delete_role(role_id)
    return message_response("role deleted")


@bp.put("/<uuid:role_id>/permissions")
@require_admin
@timing
def update_permissions(role_id: uuid.UUID):
    """Replace every permission of the role."""

    payload = load_body(permissions_update_schema)
    grants = [PermissionIn(**entry) for entry in payload["permissions"]]
    permissions = role_service().update_permissions(role_id, grants)
    return json_response(permission_list_schema.dump(permissions))
