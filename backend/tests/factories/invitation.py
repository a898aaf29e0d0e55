"""Factory Boy definition for :class:`pos_backoffice.models.Invitation`."""

from __future__ import annotations

from datetime import timedelta

import factory

from pos_backoffice.infra.security.token_hasher import hash_token
from pos_backoffice.models import Invitation, InvitationStatus
from pos_backoffice.models.base import utcnow
from tests.factories import BaseFactory


class InvitationFactory(BaseFactory):
    """
    Build persisted invitations.

    Pass ``token="..."`` to control the plaintext; only its digest is stored.
    ``tenant_id``, ``invited_by`` and ``role_id`` are required.
    """

    class Meta:
        model = Invitation
        exclude = ("token",)

    tenant_id = None
    invited_by = None
    role_id = None
    email = factory.Sequence(lambda n: f"invitee{n}@example.com")
    store_ids = factory.LazyFunction(list)
    status = InvitationStatus.PENDING
    expires_at = factory.LazyFunction(lambda: utcnow() + timedelta(days=7))

    token = factory.Sequence(lambda n: f"invitation-token-{n}")
    token_hash = factory.LazyAttribute(lambda o: hash_token(o.token))
