"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import fields, validate

from .common import NAME_LENGTH, PASSWORD_LENGTH, BaseSchema, RoleRefSchema, StoreRefSchema
from .user import UserSchema


class RegisterSchema(BaseSchema):
    """Input payload for tenant registration."""

    tenant_name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, validate=PASSWORD_LENGTH)
    first_name = fields.String(required=True, validate=NAME_LENGTH)
    last_name = fields.String(required=True, validate=NAME_LENGTH)
    store_name = fields.String(required=True, validate=NAME_LENGTH)
    store_address = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=500))


class LoginSchema(BaseSchema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True)
    # No length rule: a short password must fail as bad credentials, not 422
    password = fields.String(required=True, validate=validate.Length(min=1))


class RefreshTokenSchema(BaseSchema):
    """Payload carrying an opaque refresh token (refresh and logout)."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class TokenSchema(BaseSchema):
    """Payload carrying an emailed single-use token."""

    token = fields.String(required=True, validate=validate.Length(min=1))


class ForgotPasswordSchema(BaseSchema):
    email = fields.Email(required=True)


class ResetPasswordSchema(TokenSchema):
    password = fields.String(required=True, validate=PASSWORD_LENGTH)


class ChangePasswordSchema(BaseSchema):
    current_password = fields.String(required=True, validate=validate.Length(min=1))
    new_password = fields.String(required=True, validate=PASSWORD_LENGTH)


class AcceptInvitationSchema(TokenSchema):
    """Input payload for redeeming an invitation."""

    password = fields.String(required=True, validate=PASSWORD_LENGTH)
    first_name = fields.String(required=True, validate=NAME_LENGTH)
    last_name = fields.String(required=True, validate=NAME_LENGTH)


class TokenPairSchema(BaseSchema):
    """Response payload containing a fresh access/refresh pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)


class AuthResultSchema(BaseSchema):
    """``{user, tokens}`` returned by registration, login and invitation acceptance."""

    user = fields.Nested(UserSchema, required=True)
    tokens = fields.Nested(TokenPairSchema, required=True)


class MeSchema(BaseSchema):
    """Profile aggregation of the signed-in user."""

    user = fields.Nested(UserSchema, required=True)
    roles = fields.List(fields.Nested(RoleRefSchema))
    permissions = fields.Dict(keys=fields.String(), values=fields.List(fields.String()))
    stores = fields.List(fields.Nested(StoreRefSchema))
    all_stores_access = fields.Boolean(required=True)
