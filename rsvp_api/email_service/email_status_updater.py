from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import partial

from sqlalchemy import select

from rsvp_api.config.database import async_session_manager
from rsvp_api.models import EmailLog

# Resend event type -> email log status
EVENT_TO_STATUS = {
    "email.sent": "sent",
    "email.delivered": "delivered",
    "email.bounced": "bounced",
    "email.delivery_delayed": "sent",  # keep as sent, just note the delay
    "email.complained": "complained",
    "email.failed": "failed",
}


class EmailStatusUpdater(ABC):
    """Abstract base class for updating email delivery status."""

    @abstractmethod
    async def update_status(
        self,
        resend_email_id: str,
        event_type: str,
        event_data: dict,
    ) -> bool:
        """
        Update email log status based on webhook event.

        Args:
            resend_email_id: Resend's email ID
            event_type: Event type (email.sent, email.delivered, etc.)
            event_data: Full event data payload

        Returns:
            True if update successful, False if the event is unknown or no log matches
        """
        pass


class SQLEmailStatusUpdater(EmailStatusUpdater):
    """SQL database implementation of EmailStatusUpdater."""

    async_session_manager = staticmethod(partial(async_session_manager))

    async def update_status(
        self,
        resend_email_id: str,
        event_type: str,
        event_data: dict,
    ) -> bool:
        new_status = EVENT_TO_STATUS.get(event_type)
        if not new_status:
            return False

        async with self.async_session_manager() as session:
            result = await session.execute(
                select(EmailLog).where(EmailLog.resend_email_id == resend_email_id)
            )
            email_log = result.scalar_one_or_none()

            if not email_log:
                return False

            now = datetime.now(UTC)
            email_log.status = new_status
            email_log.last_webhook_event = event_type
            email_log.last_webhook_at = now
            if event_type == "email.delivered":
                email_log.delivered_at = now
            if event_type == "email.bounced":
                email_log.bounced_at = now
                bounce = event_data.get("bounce") or {}
                email_log.error_message = (
                    f"Bounced: {bounce.get('type', 'unknown')} - {bounce.get('message', '')}"
                )
            return True
