from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict

from rsvp_api.guests.dtos import GuestNotFoundError, RsvpStatus
from rsvp_api.guests.repository.read_models import RsvpReadModel, SqlRsvpReadModel
from rsvp_api.guests.schemas import SubGuestResponse
from rsvp_api.guests.urls import GET_INVITATION_URL

router = APIRouter()


class InvitedEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    timezone: str
    location: str | None = None
    description: str | None = None
    additional_fields: dict[str, str]
    invite_image_url: str | None = None


class InvitedGuestResponse(BaseModel):
    """The guest as they see themselves. Host-only fields are left out."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    rsvps: dict[str, RsvpStatus]
    sub_guests: list[SubGuestResponse]
    additional_guests: dict[str, int]
    additional_rsvps: dict[str, int]
    dietary_restrictions: str | None = None


class InvitationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    guest: InvitedGuestResponse
    occasion_name: str
    occasion_alias: str
    hosts: list[str]
    invite_image_url: str | None = None
    events: list[InvitedEventResponse]


def get_rsvp_read_model() -> RsvpReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRsvpReadModel()


@router.get(GET_INVITATION_URL, response_model=InvitationResponse)
async def get_invitation(
    guest_id: str,
    read_model: RsvpReadModel = Depends(get_rsvp_read_model),
) -> InvitationResponse:
    """
    Get everything the RSVP page needs for a guest link.
    The guest id is the only credential: anyone holding the link may answer.
    """
    try:
        invitation = await read_model.get_invitation(guest_id)
    except GuestNotFoundError:
        raise HTTPException(status_code=404, detail="Invalid RSVP link")
    return InvitationResponse.model_validate(invitation)
