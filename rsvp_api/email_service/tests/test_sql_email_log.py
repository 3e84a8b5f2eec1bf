from uuid import uuid4

import pytest

from rsvp_api.config.database import async_session_manager
from rsvp_api.email_service.base import OutgoingEmail
from rsvp_api.email_service.email_logger import SQLEmailLogger
from rsvp_api.email_service.email_status_updater import SQLEmailStatusUpdater
from rsvp_api.models import EmailLog


async def _logged_email(resend_email_id: str):
    email_logger = SQLEmailLogger()
    log_uuid = await email_logger.log_email_attempt(
        OutgoingEmail(
            to_address="jane@example.com",
            from_address="hosts@example.com",
            subject="You're invited",
            html_body="<p>Hi</p>",
            email_type="invitation",
            guest_id="Jane-Doe-abcdefghijkl",
        )
    )
    await email_logger.log_email_success(log_uuid, resend_email_id)
    return log_uuid


async def _load(log_uuid) -> EmailLog:
    async with async_session_manager() as session:
        return await session.get(EmailLog, log_uuid)


@pytest.mark.asyncio
async def test_attempt_then_success_marks_sent():
    resend_email_id = f"re_{uuid4().hex}"
    log_uuid = await _logged_email(resend_email_id)

    email_log = await _load(log_uuid)
    assert email_log.status == "sent"
    assert email_log.resend_email_id == resend_email_id
    assert email_log.sent_at is not None


@pytest.mark.asyncio
async def test_failure_keeps_error_message():
    email_logger = SQLEmailLogger()
    log_uuid = await email_logger.log_email_attempt(
        OutgoingEmail(
            to_address="bob@example.com",
            from_address="hosts@example.com",
            subject="Hello",
            html_body="<p>Hello</p>",
            text_body="Hello",
        )
    )
    await email_logger.log_email_failure(log_uuid, "HTTP 500")

    email_log = await _load(log_uuid)
    assert email_log.status == "failed"
    assert email_log.error_message == "HTTP 500"


@pytest.mark.asyncio
async def test_webhook_events_update_delivery_status():
    resend_email_id = f"re_{uuid4().hex}"
    log_uuid = await _logged_email(resend_email_id)
    updater = SQLEmailStatusUpdater()

    assert await updater.update_status(resend_email_id, "email.delivered", {}) is True
    delivered = await _load(log_uuid)
    assert delivered.status == "delivered"
    assert delivered.delivered_at is not None
    assert delivered.last_webhook_event == "email.delivered"

    bounce = {"bounce": {"type": "Permanent", "message": "Mailbox does not exist"}}
    assert await updater.update_status(resend_email_id, "email.bounced", bounce) is True
    bounced = await _load(log_uuid)
    assert bounced.status == "bounced"
    assert bounced.error_message == "Bounced: Permanent - Mailbox does not exist"


@pytest.mark.asyncio
async def test_unknown_event_or_email_is_ignored():
    updater = SQLEmailStatusUpdater()

    assert await updater.update_status("re_unknown", "email.delivered", {}) is False
    assert await updater.update_status("re_unknown", "email.opened", {}) is False
