"""Role, permission and feature catalog schemas."""

from __future__ import annotations

from marshmallow import fields, validate

from .common import NAME_LENGTH, BaseSchema


class RoleWriteSchema(BaseSchema):
    """Input payload for creating or renaming a role."""

    name = fields.String(required=True, validate=NAME_LENGTH)
    description = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=500))


class PermissionEntrySchema(BaseSchema):
    feature_id = fields.UUID(required=True)
    actions = fields.List(
        fields.String(validate=validate.Length(min=1)),
        required=True,
        validate=validate.Length(min=1),
    )


class PermissionsUpdateSchema(BaseSchema):
    """Replace-all permission payload: ``{permissions: [{feature_id, actions}]}``."""

    permissions = fields.List(fields.Nested(PermissionEntrySchema), required=True)


class PermissionSchema(BaseSchema):
    id = fields.UUID()
    feature_id = fields.UUID()
    feature_slug = fields.String()
    feature_name = fields.String()
    feature_module = fields.String()
    actions = fields.List(fields.String())


class RoleSchema(BaseSchema):
    """Role representation; ``permissions`` appears on detail reads."""

    id = fields.UUID(dump_only=True)
    tenant_id = fields.UUID(dump_only=True)
    name = fields.String()
    description = fields.String(allow_none=True)
    is_system_default = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    permissions = fields.List(fields.Nested(PermissionSchema), allow_none=True)


class FeatureNodeSchema(BaseSchema):
    """Recursive feature tree node."""

    id = fields.UUID()
    parent_id = fields.UUID(allow_none=True)
    name = fields.String()
    slug = fields.String()
    module = fields.String()
    actions = fields.List(fields.String())
    sort_order = fields.Integer()
    children = fields.List(fields.Nested(lambda: FeatureNodeSchema()))
