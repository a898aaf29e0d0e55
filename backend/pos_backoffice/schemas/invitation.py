"""Invitation schemas."""

from __future__ import annotations

from marshmallow import fields, validate

from .common import BaseSchema


class InvitationCreateSchema(BaseSchema):
    email = fields.Email(required=True, validate=validate.Length(max=255))
    role_id = fields.UUID(required=True)
    store_ids = fields.List(fields.UUID(), load_default=list)


class InvitationSchema(BaseSchema):
    """Invitation representation (the token is never exposed)."""

    id = fields.UUID()
    tenant_id = fields.UUID()
    invited_by = fields.UUID()
    email = fields.Email()
    role_id = fields.UUID(allow_none=True)
    store_ids = fields.List(fields.UUID())
    status = fields.String()
    expires_at = fields.DateTime()
    created_at = fields.DateTime()
