"""
InvitationService
=================

Admin-side lifecycle of invitations: create, list and cancel. Redemption is
an authentication concern and lives in
:meth:`pos_backoffice.services.auth.service.AuthService.accept_invitation`.
"""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta

from pos_backoffice.infra.security.token_hasher import generate_token
from pos_backoffice.models import Invitation, InvitationStatus
from pos_backoffice.models.base import utcnow
from pos_backoffice.models.user import normalize_email
from pos_backoffice.services._shared.base import BaseService, ServiceContext
from pos_backoffice.services._shared.errors import ConflictError, ValidationError
from pos_backoffice.services._shared.ports import Notifier
from pos_backoffice.services.invitations.dto import InvitationCreateIn, InvitationOut

log = logging.getLogger(__name__)


def to_invitation_out(invitation: Invitation) -> InvitationOut:
    return InvitationOut(
        id=invitation.id,
        tenant_id=invitation.tenant_id,
        invited_by=invitation.invited_by,
        email=invitation.email,
        role_id=invitation.role_id,
        store_ids=invitation.store_uuids,
        status=InvitationStatus(invitation.status).value,
        expires_at=invitation.expires_at,
        created_at=invitation.created_at,
    )


class InvitationService(BaseService):
    """
    Create, list and cancel invitations of the caller's tenant.

    The plaintext token only ever reaches the notifier; the database keeps
    its SHA-256 digest.
    """

    def __init__(
        self,
        *,
        notifier: Notifier,
        ttl: timedelta = timedelta(days=7),
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.notifier = notifier
        self.ttl = ttl

    def list(self) -> list[InvitationOut]:
        """Return every invitation of the tenant, newest first."""
        tenant_id = self.require_tenant()
        with self.ro_uow() as uow:
            return [to_invitation_out(i) for i in uow.invitations.list_in_tenant(tenant_id)]

    def create(self, dto: InvitationCreateIn) -> InvitationOut:
        """
        Create a pending invitation and hand its token to the notifier.

        :raises ValidationError: ``"role not found"`` or ``"store not found: <id>"``
            when a reference is missing or belongs to another tenant.
        :raises ConflictError: If the email already has an account.
        """
        tenant_id = self.require_tenant()
        email = normalize_email(dto.email)
        store_ids = list(dict.fromkeys(dto.store_ids))
        plain, digest = generate_token()

        with self.rw_uow() as uow:
            if uow.roles.get_in_tenant(tenant_id, dto.role_id) is None:
                raise ValidationError("role not found")
            known = {s.id for s in uow.stores.list_by_ids(tenant_id, store_ids)}
            for store_id in store_ids:
                if store_id not in known:
                    raise ValidationError(f"store not found: {store_id}")
            if uow.users.exists_by_email(email):
                raise ConflictError("User", "a user with this email already exists")

            invitation = uow.invitations.add(
                Invitation(
                    tenant_id=tenant_id,
                    invited_by=self.ctx.actor_id,
                    email=email,
                    role_id=dto.role_id,
                    store_ids=[str(s) for s in store_ids],
                    token_hash=digest,
                    status=InvitationStatus.PENDING,
                    expires_at=utcnow() + self.ttl,
                )
            )
            tenant_name = uow.tenants.get(tenant_id).name
            out = to_invitation_out(invitation)

        try:
            self.notifier.send_invitation(email=out.email, tenant_name=tenant_name, token=plain)
        except Exception:
            log.warning(
                "invitation hand-off failed",
                exc_info=True,
                extra={"event": "invitation.notify_failed", "invitation_id": str(out.id)},
            )
        log.info(
            "invitation created",
            extra={"event": "invitation.create", "invitation_id": str(out.id)},
        )
        return out

    def cancel(self, invitation_id: uuid.UUID) -> None:
        """
        Cancel a pending invitation; its token stops working immediately.

        :raises NotFoundError: If the invitation is not in the caller's tenant.
        :raises ValidationError: If it was already accepted or cancelled.
        """
        tenant_id = self.require_tenant()
        with self.rw_uow() as uow:
            invitation = self.found(
                "Invitation", uow.invitations.get_in_tenant(tenant_id, invitation_id), invitation_id
            )
            if invitation.status != InvitationStatus.PENDING:
                raise ValidationError("can only cancel pending invitations")
            invitation.status = InvitationStatus.CANCELLED
