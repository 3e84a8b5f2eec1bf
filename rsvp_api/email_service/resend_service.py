import logging
from typing import Protocol

import httpx

from rsvp_api.email_service.base import EmailServiceBase, OutgoingEmail
from rsvp_api.email_service.email_logger import EmailLogger, NoOpEmailLogger

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailConfig(Protocol):
    resend_api_key: str
    emails_from: str


class ResendEmailService(EmailServiceBase):
    """Sends through the Resend HTTP API. Every attempt is written to the email log."""

    def __init__(
        self,
        config: ResendEmailConfig,
        email_logger: EmailLogger | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self.email_logger = email_logger or NoOpEmailLogger()
        self._http_client_class = http_client_class

    def _payload(self, email: OutgoingEmail) -> dict:
        payload = {
            "from": email.from_address,
            "to": [email.to_address],
            "subject": email.subject,
            "html": email.html_body,
        }
        if email.text_body:
            payload["text"] = email.text_body
        return payload

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
            async with self._http_client_class() as client:
                response = await client.post(
                    RESEND_EMAILS_URL,
                    headers={"Authorization": f"Bearer {self._config.resend_api_key}"},
                    json=self._payload(email),
                )
                response.raise_for_status()
                resend_email_id = response.json().get("id")
        except httpx.HTTPError as e:
            logger.error(f"Failed to send {email_type} email to {to_address}: {e}")
            await self.email_logger.log_email_failure(log_uuid, str(e))
            raise

        await self.email_logger.log_email_success(log_uuid, resend_email_id)
        logger.info(f"Sent {email_type} email to {to_address} ({resend_email_id})")
        return resend_email_id
