import smtplib

import pytest

from rsvp_api.email_service.base import OutgoingEmail
from rsvp_api.email_service.smtp_service import SMTPEmailService, build_message
from rsvp_api.email_service.tests.inmemory_models import RecordingEmailLogger


class MockConfig:
    smtp_host = "localhost"
    smtp_port = 1025
    smtp_user = ""
    smtp_password = ""
    emails_from = "hosts@example.com"


class RecordingSMTPEmailService(SMTPEmailService):
    def __init__(self, *args, error: Exception | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.delivered = []
        self.error = error

    def _deliver(self, msg):
        if self.error:
            raise self.error
        self.delivered.append(msg)


def test_build_message_with_text_and_html():
    msg = build_message(
        OutgoingEmail(
            to_address="jane@example.com",
            from_address="hosts@example.com",
            subject="Hello",
            html_body="<p>Hello</p>",
            text_body="Hello",
        )
    )

    assert msg["To"] == "jane@example.com"
    assert msg["From"] == "hosts@example.com"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


def test_build_message_html_only():
    msg = build_message(
        OutgoingEmail(
            to_address="jane@example.com",
            from_address="hosts@example.com",
            subject="Hello",
            html_body="<p>Hello</p>",
        )
    )

    assert [part.get_content_type() for part in msg.get_payload()] == ["text/html"]


@pytest.mark.asyncio
async def test_send_email_delivers_and_logs():
    email_logger = RecordingEmailLogger()
    service = RecordingSMTPEmailService(MockConfig(), email_logger=email_logger)

    result = await service.send_email("jane@example.com", "Hello", "<p>Hello</p>", guest_id="g1")

    assert result is None
    assert service.delivered[0]["Subject"] == "Hello"
    log_uuid, email = email_logger.attempts[0]
    assert email.guest_id == "g1"
    assert email_logger.successes == [(log_uuid, None)]


@pytest.mark.asyncio
async def test_send_email_failure_is_logged_and_raised():
    email_logger = RecordingEmailLogger()
    service = RecordingSMTPEmailService(
        MockConfig(), email_logger=email_logger, error=smtplib.SMTPRecipientsRefused({})
    )

    with pytest.raises(smtplib.SMTPRecipientsRefused):
        await service.send_email("jane@example.com", "Hello", "<p>Hello</p>")

    assert len(email_logger.failures) == 1
    assert email_logger.successes == []
