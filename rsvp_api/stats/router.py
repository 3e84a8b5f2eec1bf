from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict

from rsvp_api.auth import get_current_host_id
from rsvp_api.events.repository.read_models import EventReadModel
from rsvp_api.events.router import get_event_read_model
from rsvp_api.guests.dtos import DisplayStatus
from rsvp_api.guests.features.manage_guests.router import get_guest_read_model
from rsvp_api.guests.repository.read_models import GuestReadModel
from rsvp_api.stats import urls
from rsvp_api.stats.engine import event_status_board, get_event_stats

router = APIRouter()


class EventStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: str
    event_name: str
    total_guests: int
    invited: int
    responded: int
    attending: int
    not_attending: int
    pending: int
    not_invited: int


class StatusBoardEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    guest_id: str
    sub_guest_id: str | None = None
    first_name: str
    last_name: str
    status: DisplayStatus


@router.get(urls.OCCASION_STATS_URL, response_model=list[EventStatsResponse])
async def get_occasion_stats(
    occasion_id: str,
    tags: list[str] | None = Query(default=None),
    host_id: str = Depends(get_current_host_id),
    event_read_model: EventReadModel = Depends(get_event_read_model),
    guest_read_model: GuestReadModel = Depends(get_guest_read_model),
) -> list[EventStatsResponse]:
    """
    Attendance numbers for every event of the occasion, in event order.
    ``tags`` narrows the guests counted; ``untagged`` selects guests without tags.
    """
    events = await event_read_model.list_events(host_id, occasion_id)
    guests = await guest_read_model.list_guests(host_id, occasion_id)

    return [
        EventStatsResponse(
            event_name=event.name,
            **asdict(get_event_stats(guests, event.id, tags)),
        )
        for event in events
    ]


@router.get(urls.EVENT_STATUS_BOARD_URL, response_model=list[StatusBoardEntryResponse])
async def get_status_board(
    occasion_id: str,
    event_id: str,
    host_id: str = Depends(get_current_host_id),
    event_read_model: EventReadModel = Depends(get_event_read_model),
    guest_read_model: GuestReadModel = Depends(get_guest_read_model),
) -> list[StatusBoardEntryResponse]:
    events = await event_read_model.list_events(host_id, occasion_id)
    if not any(event.id == event_id for event in events):
        raise HTTPException(status_code=404, detail=f"Event '{event_id}' not found")

    guests = await guest_read_model.list_guests(host_id, occasion_id)
    return [StatusBoardEntryResponse.model_validate(entry) for entry in event_status_board(guests, event_id)]
