import logging
from abc import ABC, abstractmethod
from dataclasses import asdict
from datetime import UTC, datetime
from functools import partial
from uuid import UUID, uuid4

from rsvp_api.config.database import async_session_manager
from rsvp_api.email_service.base import OutgoingEmail
from rsvp_api.models import EmailLog

logger = logging.getLogger(__name__)


class EmailLogger(ABC):
    """Keeps a record of every email handed to a provider."""

    @abstractmethod
    async def log_email_attempt(self, email: OutgoingEmail) -> UUID:
        """Record the email as ``pending`` before it is sent and return the log id."""
        pass

    @abstractmethod
    async def log_email_success(self, log_uuid: UUID, provider_email_id: str | None) -> None:
        pass

    @abstractmethod
    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        pass


class SQLEmailLogger(EmailLogger):
    async_session_manager = staticmethod(partial(async_session_manager))

    async def log_email_attempt(self, email: OutgoingEmail) -> UUID:
        email_log = EmailLog(**asdict(email), status="pending")
        async with self.async_session_manager() as session:
            session.add(email_log)
            await session.flush()
            return email_log.uuid

    async def _update(self, log_uuid: UUID, **values) -> None:
        async with self.async_session_manager() as session:
            email_log = await session.get(EmailLog, log_uuid)
            if email_log is None:
                logger.warning(f"Email log {log_uuid} not found, dropping update {values}")
                return
            for key, value in values.items():
                setattr(email_log, key, value)

    async def log_email_success(self, log_uuid: UUID, provider_email_id: str | None) -> None:
        await self._update(
            log_uuid,
            status="sent",
            resend_email_id=provider_email_id,
            sent_at=datetime.now(UTC),
        )

    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        await self._update(log_uuid, status="failed", error_message=error_message)


class NoOpEmailLogger(EmailLogger):
    """Used when nothing should be written, e.g. local SMTP runs."""

    async def log_email_attempt(self, email: OutgoingEmail) -> UUID:
        return uuid4()

    async def log_email_success(self, log_uuid: UUID, provider_email_id: str | None) -> None:
        pass

    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        pass
