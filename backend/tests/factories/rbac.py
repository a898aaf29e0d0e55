"""Factory Boy definitions for roles, grants and assignments."""

from __future__ import annotations

import factory

from pos_backoffice.models import (
    SYSTEM_ADMIN_DESCRIPTION,
    SYSTEM_ADMIN_ROLE,
    Role,
    RolePermission,
    UserRole,
    UserStore,
)
from tests.factories import BaseFactory
from tests.factories.tenant import TenantFactory


class RoleFactory(BaseFactory):
    class Meta:
        model = Role

    tenant_id = factory.LazyFunction(lambda: TenantFactory().id)
    name = factory.Sequence(lambda n: f"Cashier {n}")
    description = None
    is_system_default = False

    class Params:
        admin = factory.Trait(
            name=SYSTEM_ADMIN_ROLE,
            description=SYSTEM_ADMIN_DESCRIPTION,
            is_system_default=True,
        )


class RolePermissionFactory(BaseFactory):
    """Grant; ``feature_id`` must reference a seeded feature."""

    class Meta:
        model = RolePermission

    role_id = factory.LazyFunction(lambda: RoleFactory().id)
    feature_id = None
    actions = factory.LazyFunction(lambda: ["read"])


class UserRoleFactory(BaseFactory):
    class Meta:
        model = UserRole

    user_id = None
    role_id = None
    assigned_by = None


class UserStoreFactory(BaseFactory):
    class Meta:
        model = UserStore

    user_id = None
    store_id = None
    assigned_by = None
