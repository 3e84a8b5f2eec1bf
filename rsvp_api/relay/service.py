import html
import logging
from dataclasses import dataclass

from rsvp_api.email_service.base import EmailServiceBase
from rsvp_api.email_service.templates import EmailTemplates, merge_placeholders
from rsvp_api.events.dtos import EventDTO
from rsvp_api.guests.dtos import GuestNotFoundError, InvitationDTO
from rsvp_api.guests.repository.read_models import RsvpReadModel
from rsvp_api.guests.repository.write_models import GuestWriteModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailTemplateDTO:
    subject: str
    html: str


@dataclass(frozen=True)
class RelayResultDTO:
    sent: int
    skipped: int


def _describe_event(event: EventDTO) -> str:
    parts = [event.name]
    if event.start_date_time:
        parts.append(event.start_date_time.strftime("%A %d %B %Y, %H:%M"))
    if event.location:
        parts.append(event.location)
    return " - ".join(parts)


def placeholder_values(invitation: InvitationDTO) -> dict[str, str]:
    guest = invitation.guest
    return {
        "firstName": guest.first_name,
        "lastName": guest.last_name,
        "loginCode": guest.id,
        "rsvpLink": guest.rsvp_link,
        "occasionName": invitation.occasion_name,
        "hosts": " & ".join(invitation.hosts),
    }


def render_custom(template: EmailTemplateDTO, invitation: InvitationDTO) -> tuple[str, str, None]:
    values = placeholder_values(invitation)
    return (
        merge_placeholders(template.subject, values),
        merge_placeholders(template.html, values, escape=True),
        None,
    )


def render_invitation(invitation: InvitationDTO) -> tuple[str, str, str]:
    """Built-in invitation listing every event the guest is invited to."""
    subject, html_template, text_template = EmailTemplates.get_invitation_templates()
    values = placeholder_values(invitation)
    descriptions = [_describe_event(e) for e in invitation.events]

    html_body = merge_placeholders(
        html_template,
        {**values, "eventList": "".join(f"<li>{html.escape(d)}</li>" for d in descriptions)},
        escape=True,
        raw_keys=frozenset({"eventList"}),
    )
    text_body = merge_placeholders(
        text_template,
        {**values, "eventListText": "\n".join(f"- {d}" for d in descriptions)},
    )
    return merge_placeholders(subject, values), html_body, text_body


class InvitationRelay:
    """Merges guests into an email template and sends one email per guest."""

    def __init__(
        self,
        rsvp_read_model: RsvpReadModel,
        guest_write_model: GuestWriteModel,
        email_service: EmailServiceBase,
    ):
        self._rsvp_read_model = rsvp_read_model
        self._guest_write_model = guest_write_model
        self._email_service = email_service

    async def send(
        self, guest_ids: list[str], template: EmailTemplateDTO | None = None
    ) -> RelayResultDTO:
        sent_ids: list[str] = []
        skipped = 0
        try:
            for guest_id in dict.fromkeys(guest_ids):
                try:
                    invitation = await self._rsvp_read_model.get_invitation(guest_id)
                except GuestNotFoundError:
                    logger.warning(f"Skipping unknown guest {guest_id}")
                    skipped += 1
                    continue

                guest = invitation.guest
                if not guest.email:
                    logger.info(f"Skipping guest {guest_id} without email")
                    skipped += 1
                    continue

                if template is None:
                    subject, html_body, text_body = render_invitation(invitation)
                    email_type = "invitation"
                else:
                    subject, html_body, text_body = render_custom(template, invitation)
                    email_type = "custom"

                await self._email_service.send_email(
                    to_address=guest.email,
                    subject=subject,
                    html_body=html_body,
                    text_body=text_body,
                    email_type=email_type,
                    guest_id=guest.id,
                )
                sent_ids.append(guest.id)
        finally:
            # guests emailed before a provider failure stay marked
            await self._guest_write_model.mark_email_sent(sent_ids)

        logger.info(f"Relay finished: {len(sent_ids)} sent, {skipped} skipped")
        return RelayResultDTO(sent=len(sent_ids), skipped=skipped)
