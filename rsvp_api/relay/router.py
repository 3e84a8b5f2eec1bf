import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from rsvp_api.email_service import get_email_service
from rsvp_api.email_service.base import EmailServiceBase
from rsvp_api.guests.features.get_guest_info.router import get_rsvp_read_model
from rsvp_api.guests.features.manage_guests.router import get_guest_write_model
from rsvp_api.guests.repository.read_models import RsvpReadModel
from rsvp_api.guests.repository.write_models import GuestWriteModel
from rsvp_api.relay import urls
from rsvp_api.relay.service import EmailTemplateDTO, InvitationRelay

logger = logging.getLogger(__name__)

router = APIRouter()


class TemplatePayload(BaseModel):
    subject: str
    html: str


class SendEmailsPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    template: TemplatePayload | None = None
    guest_ids: list[str] = Field(default_factory=list, alias="guestIds")


class SendEmailsResponse(BaseModel):
    success: bool
    sent: int
    skipped: int


def get_relay_email_service() -> EmailServiceBase:
    return get_email_service()


def get_invitation_relay(
    rsvp_read_model: RsvpReadModel = Depends(get_rsvp_read_model),
    guest_write_model: GuestWriteModel = Depends(get_guest_write_model),
    email_service: EmailServiceBase = Depends(get_relay_email_service),
) -> InvitationRelay:
    return InvitationRelay(rsvp_read_model, guest_write_model, email_service)


@router.post(urls.SEND_EMAILS_URL, response_model=SendEmailsResponse)
async def send_emails(
    payload: SendEmailsPayload,
    relay: InvitationRelay = Depends(get_invitation_relay),
):
    if not payload.guest_ids:
        return JSONResponse(status_code=400, content={"error": "No guest IDs provided"})

    template = (
        EmailTemplateDTO(subject=payload.template.subject, html=payload.template.html)
        if payload.template
        else None
    )
    try:
        result = await relay.send(payload.guest_ids, template)
    except Exception as e:
        logger.exception(f"Sending emails to {len(payload.guest_ids)} guests failed")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return SendEmailsResponse(success=True, sent=result.sent, skipped=result.skipped)


@router.get(urls.RELAY_HEALTH_URL, response_class=PlainTextResponse)
async def relay_health() -> str:
    return "OK"
