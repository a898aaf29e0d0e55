"""Store schemas."""

from __future__ import annotations

from marshmallow import fields, validate

from .common import NAME_LENGTH, BaseSchema


class StoreCreateSchema(BaseSchema):
    name = fields.String(required=True, validate=NAME_LENGTH)
    address = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=500))
    phone = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=50))


class StoreUpdateSchema(StoreCreateSchema):
    is_active = fields.Boolean(load_default=None, allow_none=True)


class StoreSchema(BaseSchema):
    id = fields.UUID(dump_only=True)
    tenant_id = fields.UUID(dump_only=True)
    name = fields.String()
    address = fields.String(allow_none=True)
    phone = fields.String(allow_none=True)
    is_active = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
