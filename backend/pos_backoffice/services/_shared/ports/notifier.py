from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class Notifier(Protocol):
    """Port handing emailed tokens to the (external) delivery channel.

    Implementations receive the plaintext token exactly once; they must not
    persist or log it.
    """

    def send_email_verification(self, *, email: str, first_name: str, token: str) -> None: ...

    def send_password_reset(self, *, email: str, first_name: str, token: str) -> None: ...

    def send_invitation(self, *, email: str, tenant_name: str, token: str) -> None: ...


@dataclass
class RecordingNotifier(Notifier):
    """Notifier test double keeping every hand-off in memory."""

    sent: list[tuple[str, str, str]] = field(default_factory=list)

    def send_email_verification(self, *, email: str, first_name: str, token: str) -> None:
        self.sent.append(("email_verification", email, token))

    def send_password_reset(self, *, email: str, first_name: str, token: str) -> None:
        self.sent.append(("password_reset", email, token))

    def send_invitation(self, *, email: str, tenant_name: str, token: str) -> None:
        self.sent.append(("invitation", email, token))

    def last_token(self, kind: str) -> str:
        """Return the most recent token handed off for ``kind``."""
        for sent_kind, _, token in reversed(self.sent):
            if sent_kind == kind:
                return token
        raise LookupError(f"no {kind} notification recorded")
