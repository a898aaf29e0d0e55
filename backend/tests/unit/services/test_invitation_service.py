"""Unit tests for InvitationService."""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from sqlalchemy import select

from pos_backoffice.infra.security.token_hasher import hash_token
from pos_backoffice.models import Invitation, InvitationStatus
from pos_backoffice.models.base import utcnow
from pos_backoffice.services._shared.errors import ConflictError, NotFoundError, ValidationError
from pos_backoffice.services._shared.ports import RecordingNotifier
from pos_backoffice.services.invitations import InvitationService
from pos_backoffice.services.invitations.dto import InvitationCreateIn
from tests.factories.invitation import InvitationFactory
from tests.factories.tenant import StoreFactory
from tests.factories.user import UserFactory
from tests.helpers.builders import add_role, build_tenant


@pytest.fixture()
def world(session, features):
    return build_tenant(session, name="Corner Bakery")


@pytest.fixture()
def recorder() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def service(world, recorder) -> InvitationService:
    return InvitationService(notifier=recorder, ttl=timedelta(days=7), ctx=world.ctx())


def test_create_stores_digest_and_hands_token_to_notifier(service, session, world, recorder):
    cashier = add_role(world, name="Cashier")

    out = service.create(
        InvitationCreateIn(email="New@Example.com", role_id=cashier.id, store_ids=[world.store.id])
    )

    assert out.email == "new@example.com"
    assert out.status == "pending"
    assert out.invited_by == world.admin.id
    assert out.store_ids == [world.store.id]
    assert out.expires_at - utcnow() > timedelta(days=6)

    kind, email, token = recorder.sent[-1]
    assert (kind, email) == ("invitation", "new@example.com")
    row = session.get(Invitation, out.id)
    assert row.token_hash == hash_token(token)


def test_create_rejects_role_of_another_tenant(service, session):
    other = build_tenant(session)

    with pytest.raises(ValidationError) as excinfo:
        service.create(InvitationCreateIn(email="x@example.com", role_id=other.admin_role.id))

    assert str(excinfo.value) == "role not found"


def test_create_rejects_foreign_store(service, world):
    foreign = StoreFactory()

    with pytest.raises(ValidationError) as excinfo:
        service.create(
            InvitationCreateIn(
                email="x@example.com",
                role_id=world.admin_role.id,
                store_ids=[world.store.id, foreign.id],
            )
        )

    assert str(excinfo.value) == f"store not found: {foreign.id}"


def test_create_rejects_existing_account(service, world, recorder):
    UserFactory(email="taken@example.com")

    with pytest.raises(ConflictError):
        service.create(InvitationCreateIn(email="TAKEN@example.com", role_id=world.admin_role.id))

    assert recorder.sent == []


def test_create_survives_notifier_failure(world, session):
    class Broken(RecordingNotifier):
        def send_invitation(self, **kwargs):
            raise RuntimeError("smtp down")

    service = InvitationService(notifier=Broken(), ctx=world.ctx())

    out = service.create(InvitationCreateIn(email="x@example.com", role_id=world.admin_role.id))

    assert session.get(Invitation, out.id) is not None


def test_list_is_tenant_scoped(service, session, world):
    InvitationFactory(tenant_id=world.tenant.id, invited_by=world.admin.id, role_id=world.admin_role.id)
    other = build_tenant(session)
    InvitationFactory(tenant_id=other.tenant.id, invited_by=other.admin.id, role_id=other.admin_role.id)

    listed = service.list()

    assert len(listed) == 1
    assert listed[0].tenant_id == world.tenant.id


def test_cancel_pending_invitation(service, session, world):
    invitation = InvitationFactory(
        tenant_id=world.tenant.id, invited_by=world.admin.id, role_id=world.admin_role.id
    )

    service.cancel(invitation.id)

    assert session.get(Invitation, invitation.id).status == InvitationStatus.CANCELLED
    with pytest.raises(ValidationError) as excinfo:
        service.cancel(invitation.id)
    assert str(excinfo.value) == "can only cancel pending invitations"


def test_cancel_unknown_or_foreign_invitation(service, session):
    other = build_tenant(session)
    foreign = InvitationFactory(
        tenant_id=other.tenant.id, invited_by=other.admin.id, role_id=other.admin_role.id
    )

    with pytest.raises(NotFoundError):
        service.cancel(foreign.id)
    with pytest.raises(NotFoundError):
        service.cancel(uuid.uuid4())
    assert session.execute(select(Invitation.status)).scalar_one() == InvitationStatus.PENDING
