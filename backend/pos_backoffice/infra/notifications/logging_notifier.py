"""Notifier adapter that renders messages and logs the hand-off.

Email transport (SMTP, provider APIs) is owned by an external collaborator;
this adapter builds the subject and link the message would carry and records
that a hand-off happened. The token itself is never logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

from pos_backoffice.services._shared.ports import Notifier

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderedMessage:
    """An email ready for delivery."""

    to: str
    sender: str
    subject: str
    link: str


@dataclass(slots=True)
class LoggingNotifier(Notifier):
    """
    Render verification, reset and invitation emails and log the hand-off.

    :param app_url: Front-end base URL used to build links (``APP_URL``).
    :param sender: Sender address (``MAIL_FROM``).
    """

    app_url: str
    sender: str

    def _link(self, path: str, token: str) -> str:
        return f"{self.app_url.rstrip('/')}/{path}?{urlencode({'token': token})}"

    def _dispatch(self, kind: str, message: RenderedMessage) -> None:
        # The link embeds the token: log the recipient and kind only
        log.info(
            "notification handed off: %s to=%s subject=%r",
            kind,
            message.to,
            message.subject,
            extra={"event": f"notify.{kind}"},
        )

    def render_email_verification(self, *, email: str, first_name: str, token: str) -> RenderedMessage:
        return RenderedMessage(
            to=email,
            sender=self.sender,
            subject=f"Welcome {first_name}, please verify your email",
            link=self._link("verify-email", token),
        )

    def render_password_reset(self, *, email: str, first_name: str, token: str) -> RenderedMessage:
        return RenderedMessage(
            to=email,
            sender=self.sender,
            subject="Reset your password",
            link=self._link("reset-password", token),
        )

    def render_invitation(self, *, email: str, tenant_name: str, token: str) -> RenderedMessage:
        return RenderedMessage(
            to=email,
            sender=self.sender,
            subject=f"You have been invited to join {tenant_name}",
            link=self._link("accept-invitation", token),
        )

    def send_email_verification(self, *, email: str, first_name: str, token: str) -> None:
        message = self.render_email_verification(email=email, first_name=first_name, token=token)
        self._dispatch("email_verification", message)

    def send_password_reset(self, *, email: str, first_name: str, token: str) -> None:
        message = self.render_password_reset(email=email, first_name=first_name, token=token)
        self._dispatch("password_reset", message)

    def send_invitation(self, *, email: str, tenant_name: str, token: str) -> None:
        message = self.render_invitation(email=email, tenant_name=tenant_name, token=token)
        self._dispatch("invitation", message)
