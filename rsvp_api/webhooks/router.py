import json
import logging
from typing import Any, Protocol

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from rsvp_api.config.settings import settings
from rsvp_api.email_service.email_status_updater import (
    EmailStatusUpdater,
    SQLEmailStatusUpdater,
)
from rsvp_api.webhooks import urls
from rsvp_api.webhooks.schema import ResendWebhookEvent

logger = logging.getLogger(__name__)

router = APIRouter()

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


class WebhookVerifier(Protocol):
    """Protocol for webhook signature verification."""

    def __call__(self, payload: str, headers: dict[str, str]) -> dict[str, Any]:
        """Verify webhook signature and return parsed payload."""
        ...


class SvixWebhookVerifier:
    """Default webhook verifier using Svix."""

    def __call__(self, payload: str, headers: dict[str, str]) -> dict[str, Any]:
        from svix.webhooks import Webhook, WebhookVerificationError

        secret = settings.resend_webhook_secret
        if not secret:
            raise ValueError("Webhook secret not configured")

        wh = Webhook(secret)

        try:
            return wh.verify(payload, headers)
        except WebhookVerificationError as e:
            raise HTTPException(status_code=401, detail=f"Invalid signature: {e}")


def get_webhook_verifier() -> WebhookVerifier:
    """Factory for webhook verifier. Override in tests."""
    return SvixWebhookVerifier()


def get_email_status_updater() -> EmailStatusUpdater:
    """Factory for the email status updater. Override in tests."""
    return SQLEmailStatusUpdater()


@router.post(urls.RESEND_WEBHOOK_URL)
async def resend_status_webhook(
    request: Request,
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    status_updater: EmailStatusUpdater = Depends(get_email_status_updater),
) -> dict[str, str]:
    """Record delivery status changes for emails sent through Resend."""
    body = await request.body()
    payload_str = body.decode("utf-8")

    headers = {name: value for name in SVIX_HEADERS if (value := request.headers.get(name))}

    try:
        verifier(payload_str, headers)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Webhook verification error: {e}")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        raw = json.loads(payload_str)
        event = ResendWebhookEvent.model_validate(raw)
    except (ValueError, ValidationError) as e:
        logger.warning(f"Malformed webhook payload: {e}")
        raise HTTPException(status_code=400, detail="Malformed payload")

    if not event.data.email_id:
        logger.warning(f"Received {event.type} webhook without email_id")
        return {"status": "ignored"}

    updated = await status_updater.update_status(
        resend_email_id=event.data.email_id,
        event_type=event.type,
        event_data=raw.get("data", {}),
    )
    if not updated:
        logger.info(f"No email log updated for {event.type} on {event.data.email_id}")
        return {"status": "ignored"}

    logger.info(f"Email {event.data.email_id} status updated from {event.type}")
    return {"status": "received"}
