"""Invitation management endpoints (administrators only)."""

from __future__ import annotations

import uuid

from flask import Blueprint

from pos_backoffice.api.deps import (
    invitation_service,
    json_response,
    load_body,
    message_response,
    require_admin,
    timing,
)
from pos_backoffice.schemas import InvitationCreateSchema, InvitationSchema
from pos_backoffice.services.invitations.dto import InvitationCreateIn

bp = Blueprint("invitations", __name__)

invitation_schema = InvitationSchema()
invitation_list_schema = InvitationSchema(many=True)
invitation_create_schema = InvitationCreateSchema()


@bp.get("")
@require_admin
@timing
def list_invitations():
    return json_response(invitation_list_schema.dump(invitation_service().list()))


@bp.post("")
@require_admin
@timing
def create_invitation():
    """Invite someone into the tenant; the token goes out by email only."""

    payload = load_body(invitation_create_schema)
    invitation = invitation_service().create(InvitationCreateIn(**payload))
    return json_response(invitation_schema.dump(invitation), status=201)


@bp.delete("/<uuid:invitation_id>")
@require_admin
@timing
def cancel_invitation(invitation_id: uuid.UUID):
    invitation_service().cancel(invitation_id)
    return message_response("invitation cancelled")
