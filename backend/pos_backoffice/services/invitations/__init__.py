from pos_backoffice.services.invitations.service import InvitationService

__all__ = ["InvitationService"]
