import smtplib
from types import SimpleNamespace

import pytest

from src.email_service.smtp_service import SMTPEmailService
from src.rsvps.errors import NotificationError

CONFIG = SimpleNamespace(
    smtp_host="localhost",
    smtp_port=1025,
    smtp_user="",
    smtp_password="",
    emails_from="rsvp@example.com",
    email_sender_name="noReply",
    couple_names="Diamond & Babatunde",
    wedding_date="December 13, 2025",
    wedding_location="Lagos, Nigeria",
)


async def test_send_rsvp_received(monkeypatch):
    delivered = []
    service = SMTPEmailService(CONFIG)
    monkeypatch.setattr(service, "_deliver", delivered.append)

    await service.send_rsvp_received(to_address="ada@example.com", guest_name="Ada")

    assert len(delivered) == 1
    msg = delivered[0]
    assert msg["To"] == "ada@example.com"
    assert msg["From"] == "noReply <rsvp@example.com>"
    assert msg["Subject"] == "We've Received Your RSVP!"


async def test_delivery_failure_raises_notification_error(monkeypatch):
    service = SMTPEmailService(CONFIG)

    def _deliver(msg):
        raise smtplib.SMTPServerDisconnected("gone")

    monkeypatch.setattr(service, "_deliver", _deliver)

    with pytest.raises(NotificationError):
        await service.send_rsvp_rejected(to_address="ada@example.com", guest_name="Ada")
