"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

# Password bounds shared by every payload that sets a password
PASSWORD_LENGTH = validate.Length(min=8, max=128)
NAME_LENGTH = validate.Length(min=1, max=100)


class BaseSchema(Schema):
    """Base schema enabling ordered output for consistent API responses."""

    class Meta:
        ordered = True


class MessageSchema(BaseSchema):
    """``{message}`` acknowledgement body."""

    message = fields.String(required=True)


class IdRefSchema(BaseSchema):
    """Compact ``{id, name, ...}`` reference used inside aggregates."""

    id = fields.UUID(required=True)
    name = fields.String(required=True)


class RoleRefSchema(IdRefSchema):
    is_system_default = fields.Boolean(required=True)


class StoreRefSchema(IdRefSchema):
    is_active = fields.Boolean(required=True)
