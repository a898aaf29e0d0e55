"""Unit tests for loading the caller's access context."""

from __future__ import annotations

from pos_backoffice.services.authorization import AuthorizationService
from tests.factories.rbac import RoleFactory, UserRoleFactory
from tests.factories.tenant import StoreFactory
from tests.helpers.builders import add_member, add_role, build_tenant, grant


def load(user):
    return AuthorizationService().load_context(
        user_id=user.id, tenant_id=user.tenant_id, email=user.email
    )


def test_admin_gets_every_grant_and_full_store_access(session, features):
    world = build_tenant(session)

    ctx = load(world.admin)

    assert ctx.is_admin is True
    assert ctx.accessible_store_ids() is None
    assert ctx.has_permission("purchase.delivery", "edit") is True
    assert ctx.has_permission("purchase.delivery", "delete") is False


def test_permissions_are_unioned_across_roles(session, features):
    world = build_tenant(session)
    reader = add_role(world, name="Reader")
    writer = add_role(world, name="Writer")
    grant(reader, "master-data.product", ["read"], session)
    grant(writer, "master-data.product", ["create"], session)
    grant(writer, "purchase.order", ["read"], session)
    member = add_member(world, role=reader)
    UserRoleFactory(user_id=member.id, role_id=writer.id)

    ctx = load(member)

    assert ctx.permission_map() == {
        "master-data.product": ["create", "read"],
        "purchase.order": ["read"],
    }
    assert ctx.is_admin is False


def test_undeclared_actions_in_a_grant_are_ignored(session, features):
    world = build_tenant(session)
    role = add_role(world, name="Odd")
    # Stored before the feature narrowed its vocabulary
    grant(role, "reporting.sales", ["read", "delete"], session)
    member = add_member(world, role=role)

    ctx = load(member)

    assert ctx.has_permission("reporting.sales", "read") is True
    assert ctx.has_permission("reporting.sales", "delete") is False


def test_store_scope_comes_from_assignments(session, features):
    world = build_tenant(session)
    second = StoreFactory(tenant_id=world.tenant.id, name="Airport")
    member = add_member(world, stores=[second])

    ctx = load(member)

    assert ctx.accessible_store_ids() == frozenset({second.id})
    assert ctx.can_access_store(world.store.id) is False


def test_roles_of_another_tenant_are_ignored(session, features):
    world = build_tenant(session)
    foreign_admin = RoleFactory(admin=True)  # belongs to a fresh tenant
    member = add_member(world)
    UserRoleFactory(user_id=member.id, role_id=foreign_admin.id)

    ctx = load(member)

    assert ctx.is_admin is False
    assert ctx.permission_map() == {}


def test_user_without_roles_has_nothing(session, features):
    world = build_tenant(session)
    member = add_member(world)

    ctx = load(member)

    assert ctx.permission_map() == {}
    assert ctx.accessible_store_ids() == frozenset()
