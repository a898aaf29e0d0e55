"""Unit tests for the logging notifier adapter."""

from __future__ import annotations

import logging

import pytest

from pos_backoffice.infra.notifications.logging_notifier import LoggingNotifier


@pytest.fixture()
def notifier() -> LoggingNotifier:
    return LoggingNotifier(app_url="https://backoffice.example/", sender="noreply@example.com")


def test_verification_email_links_to_front_end(notifier):
    message = notifier.render_email_verification(email="a@b.co", first_name="Ada", token="t0k")

    assert message.to == "a@b.co"
    assert message.sender == "noreply@example.com"
    assert "Ada" in message.subject
    assert message.link == "https://backoffice.example/verify-email?token=t0k"


def test_reset_and_invitation_links(notifier):
    reset = notifier.render_password_reset(email="a@b.co", first_name="Ada", token="r")
    invite = notifier.render_invitation(email="c@d.co", tenant_name="Bakery", token="i")

    assert reset.link.endswith("/reset-password?token=r")
    assert invite.link.endswith("/accept-invitation?token=i")
    assert "Bakery" in invite.subject


def test_hand_off_never_logs_the_token(notifier, caplog):
    with caplog.at_level(logging.INFO, logger="pos_backoffice.infra.notifications.logging_notifier"):
        notifier.send_password_reset(email="a@b.co", first_name="Ada", token="super-secret-token")

    assert "a@b.co" in caplog.text
    assert "super-secret-token" not in caplog.text
