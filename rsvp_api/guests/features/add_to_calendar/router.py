from fastapi import APIRouter, Depends, HTTPException, Response

from rsvp_api.guests.dtos import GuestNotFoundError
from rsvp_api.guests.features.add_to_calendar.ics import (
    EventNotScheduledError,
    build_event_ics,
    calendar_filename,
)
from rsvp_api.guests.features.get_guest_info.router import get_rsvp_read_model
from rsvp_api.guests.repository.read_models import RsvpReadModel
from rsvp_api.guests.urls import EVENT_CALENDAR_URL

router = APIRouter()


@router.get(EVENT_CALENDAR_URL, response_class=Response)
async def download_event_calendar(
    guest_id: str,
    event_id: str,
    read_model: RsvpReadModel = Depends(get_rsvp_read_model),
) -> Response:
    """Calendar file for one event the guest is invited to."""
    try:
        invitation = await read_model.get_invitation(guest_id)
    except GuestNotFoundError:
        raise HTTPException(status_code=404, detail="Invalid RSVP link")

    event = next((e for e in invitation.events if e.id == event_id), None)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    try:
        content = build_event_ics(event)
    except EventNotScheduledError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return Response(
        content=content,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{calendar_filename(event)}"'},
    )
