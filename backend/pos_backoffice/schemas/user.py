"""User Marshmallow schemas."""

from __future__ import annotations

from marshmallow import fields

from .common import NAME_LENGTH, BaseSchema, RoleRefSchema, StoreRefSchema


class UserSchema(BaseSchema):
    """Serialize users for API responses (never the password hash)."""

    id = fields.UUID(dump_only=True)
    tenant_id = fields.UUID(dump_only=True)
    email = fields.Email(dump_only=True)
    first_name = fields.String(dump_only=True)
    last_name = fields.String(dump_only=True)
    is_email_verified = fields.Boolean(dump_only=True)
    is_active = fields.Boolean(dump_only=True)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)


class UserUpdateSchema(BaseSchema):
    """Input payload for an administrator editing a user."""

    first_name = fields.String(required=True, validate=NAME_LENGTH)
    last_name = fields.String(required=True, validate=NAME_LENGTH)
    is_active = fields.Boolean(load_default=None, allow_none=True)


class UserStoresSchema(BaseSchema):
    """Replace-all store assignment payload."""

    store_ids = fields.List(fields.UUID(), required=True)


class UserDetailSchema(BaseSchema):
    """User with roles and assigned stores."""

    user = fields.Nested(UserSchema, required=True)
    roles = fields.List(fields.Nested(RoleRefSchema))
    stores = fields.List(fields.Nested(StoreRefSchema))
