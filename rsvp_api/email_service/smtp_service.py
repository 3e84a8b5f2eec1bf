import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from rsvp_api.email_service.base import EmailServiceBase, OutgoingEmail
from rsvp_api.email_service.email_logger import EmailLogger, NoOpEmailLogger

logger = logging.getLogger(__name__)


class SMTPEmailConfig(Protocol):
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    emails_from: str


def build_message(email: OutgoingEmail) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = email.subject
    msg["From"] = email.from_address
    msg["To"] = email.to_address

    # the last part is the preferred one
    if email.text_body:
        msg.attach(MIMEText(email.text_body, "plain"))
    msg.attach(MIMEText(email.html_body, "html"))
    return msg


class SMTPEmailService(EmailServiceBase):
    """Fallback sender for local runs, e.g. against MailHog on port 1025."""

    def __init__(self, config: SMTPEmailConfig, email_logger: EmailLogger | None = None):
        self._config = config
        self.email_logger = email_logger or NoOpEmailLogger()

    def _deliver(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self._config.smtp_host, self._config.smtp_port) as server:
            if self._config.smtp_user and self._config.smtp_password:
                server.starttls()
                server.login(self._config.smtp_user, self._config.smtp_password)
            server.send_message(msg)

    async def send_email(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str | None = None,
        email_type: str = "custom",
        guest_id: str | None = None,
    ) -> str | None:
        email = OutgoingEmail(
            to_address=to_address,
            from_address=self._config.emails_from,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type=email_type,
            guest_id=guest_id,
        )
        log_uuid = await self.email_logger.log_email_attempt(email)

        try:
            # smtplib blocks
            await asyncio.to_thread(self._deliver, build_message(email))
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send {email_type} email to {to_address} via SMTP: {e}")
            await self.email_logger.log_email_failure(log_uuid, str(e))
            raise

        await self.email_logger.log_email_success(log_uuid, None)
        logger.info(f"Sent {email_type} email to {to_address} via SMTP")
        return None
