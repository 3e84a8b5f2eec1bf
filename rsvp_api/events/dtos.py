from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rsvp_api.models import Event


class EventNotFoundError(ValueError):
    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event '{event_id}' not found")


class DuplicateEventNameError(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"An event named '{name}' already exists for this occasion")


class UnknownAliasError(Exception):
    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f"Alias '{alias}' does not belong to any of your occasions")


def event_name_key(name: str) -> str:
    """Names compare trimmed and case-insensitively."""
    return " ".join((name or "").split()).casefold()


@dataclass(frozen=True)
class EventDTO:
    id: str
    occasion_id: str
    occasion_alias: str
    name: str
    created_by: str
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    timezone: str = "UTC"
    location: str | None = None
    description: str | None = None
    additional_fields: dict[str, str] = field(default_factory=dict)
    invite_image_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_orm(cls, event: "Event") -> "EventDTO":
        return cls(
            id=event.id,
            occasion_id=event.occasion_id,
            occasion_alias=event.occasion_alias,
            name=event.name,
            created_by=event.created_by,
            start_date_time=event.start_date_time,
            end_date_time=event.end_date_time,
            timezone=event.timezone,
            location=event.location,
            description=event.description,
            additional_fields=dict(event.additional_fields or {}),
            invite_image_url=event.invite_image_url,
            created_at=event.created_at,
        )


@dataclass(frozen=True)
class EventCreateDTO:
    name: str
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    timezone: str = "UTC"
    location: str | None = None
    description: str | None = None
    additional_fields: dict[str, str] = field(default_factory=dict)
    invite_image_url: str | None = None


def sort_events(events: list[EventDTO]) -> list[EventDTO]:
    """Chronological, undated events last."""

    def key(event: EventDTO):
        start = event.start_date_time
        # sqlite hands back naive datetimes, compare on the wall-clock value
        start = start.replace(tzinfo=None) if start else None
        return (start is None, start or datetime.min, event_name_key(event.name))

    return sorted(events, key=key)
