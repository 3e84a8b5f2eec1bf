from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field, model_validator

from rsvp_api.auth import get_current_host_id
from rsvp_api.events import urls
from rsvp_api.events.dtos import (
    DuplicateEventNameError,
    EventCreateDTO,
    EventNotFoundError,
    UnknownAliasError,
)
from rsvp_api.events.repository.read_models import EventReadModel, SqlEventReadModel
from rsvp_api.events.repository.write_models import EventWriteModel, SqlEventWriteModel
from rsvp_api.occasions.dtos import OccasionNotFoundError

router = APIRouter()

NULLABLE_FIELDS = frozenset(
    {"start_date_time", "end_date_time", "location", "description", "invite_image_url"}
)


class EventCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    timezone: str = "UTC"
    location: str | None = None
    description: str | None = None
    additional_fields: dict[str, str] = {}
    invite_image_url: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "EventCreate":
        if self.start_date_time and self.end_date_time and self.end_date_time < self.start_date_time:
            raise ValueError("end_date_time must not be before start_date_time")
        return self


class EventUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    timezone: str | None = None
    location: str | None = None
    description: str | None = None
    additional_fields: dict[str, str] | None = None
    invite_image_url: str | None = None
    occasion_alias: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "EventUpdate":
        if self.start_date_time and self.end_date_time and self.end_date_time < self.start_date_time:
            raise ValueError("end_date_time must not be before start_date_time")
        return self


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    occasion_id: str
    occasion_alias: str
    name: str
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    timezone: str
    location: str | None = None
    description: str | None = None
    additional_fields: dict[str, str]
    invite_image_url: str | None = None
    created_by: str


def get_event_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


def get_event_write_model() -> EventWriteModel:
    """Dependency to get event write model instance."""
    return SqlEventWriteModel()


@router.get(urls.OCCASION_EVENTS_URL, response_model=list[EventResponse])
async def list_events(
    occasion_id: str,
    host_id: str = Depends(get_current_host_id),
    read_model: EventReadModel = Depends(get_event_read_model),
) -> list[EventResponse]:
    events = await read_model.list_events(host_id, occasion_id)
    return [EventResponse.model_validate(e) for e in events]


@router.post(urls.OCCASION_EVENTS_URL, response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    occasion_id: str,
    data: EventCreate,
    host_id: str = Depends(get_current_host_id),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventResponse:
    try:
        event = await write_model.create_event(
            host_id, occasion_id, EventCreateDTO(**data.model_dump())
        )
    except OccasionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateEventNameError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return EventResponse.model_validate(event)


@router.patch(urls.EVENT_URL, response_model=EventResponse)
async def update_event(
    event_id: str,
    data: EventUpdate,
    host_id: str = Depends(get_current_host_id),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventResponse:
    try:
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        event = await write_model.update_event(host_id, event_id, changes)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateEventNameError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UnknownAliasError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return EventResponse.model_validate(event)


@router.delete(urls.EVENT_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    host_id: str = Depends(get_current_host_id),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> Response:
    try:
        await write_model.delete_event(host_id, event_id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
