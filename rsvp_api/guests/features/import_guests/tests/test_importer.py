import pytest

from rsvp_api.events.dtos import EventDTO, EventNotFoundError
from rsvp_api.events.repository.read_models import EventReadModel
from rsvp_api.guests.dtos import GuestCreateDTO, GuestDTO, GuestIdStrategy, RsvpStatus
from rsvp_api.guests.features.import_guests.importer import (
    RowError,
    import_guests,
    parse_row,
)
from rsvp_api.guests.repository.write_models import GuestWriteModel

EVENTS = [
    EventDTO(id="ev-ceremony", occasion_id="o1", occasion_alias="jane-and-joe", name="Ceremony", created_by="h"),
    EventDTO(id="ev-dinner", occasion_id="o1", occasion_alias="jane-and-joe", name="Dinner", created_by="h"),
]


class InMemoryEventReadModel(EventReadModel):
    def __init__(self, events: list[EventDTO]):
        self._events = events

    async def list_events(self, host_id: str, occasion_id: str) -> list[EventDTO]:
        return list(self._events)

    async def get_event(self, host_id: str, event_id: str) -> EventDTO:
        for event in self._events:
            if event.id == event_id:
                return event
        raise EventNotFoundError(event_id)


class RecordingGuestWriteModel(GuestWriteModel):
    """Keeps created guests in memory."""

    def __init__(self):
        self.created: list[tuple[GuestCreateDTO, GuestIdStrategy]] = []

    async def create_guest(self, host_id, occasion_id, data, id_strategy=GuestIdStrategy.NAME):
        self.created.append((data, id_strategy))
        return GuestDTO(
            id=f"guest-{len(self.created)}",
            occasion_id=occasion_id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            rsvps={k: RsvpStatus.normalize(v) for k, v in data.rsvps.items()},
            additional_guests=dict(data.additional_guests),
        )

    async def update_guest(self, host_id, guest_id, changes):
        raise NotImplementedError

    async def delete_guest(self, host_id, guest_id):
        raise NotImplementedError

    async def mark_email_sent(self, guest_ids):
        return 0


def test_parse_row_with_plus_one_caps():
    row = parse_row(2, ["Jane", "Doe", "jane@example.com", "Ceremony:2; Dinner"])

    assert row.first_name == "Jane"
    assert row.email == "jane@example.com"
    assert row.invitations == {"Ceremony": 2, "Dinner": 0}


def test_parse_row_without_event_column_invites_everywhere():
    row = parse_row(2, ["Jane", "Doe", ""])

    assert row.email is None
    assert row.invitations is None


@pytest.mark.parametrize(
    "cells",
    [["", "Doe", "x@example.com"], ["Jane"], ["Jane", "Doe", "", "Ceremony:lots"]],
)
def test_parse_row_rejects_bad_rows(cells):
    with pytest.raises(RowError):
        parse_row(2, cells)


@pytest.mark.asyncio
async def test_import_guests():
    csv_text = "\n".join(
        [
            "firstName,lastName,email,eventType",
            "Jane,Doe,jane@example.com,Ceremony:1",
            "John,Smith,,",
            ",Nameless,nobody@example.com,",
            "Ann,Other,ann@example.com,Brunch",
            "",
            "Max,Power,max@example.com,ceremony;Dinner:2",
        ]
    )
    write_model = RecordingGuestWriteModel()

    result = await import_guests(
        "h", "o1", csv_text, InMemoryEventReadModel(EVENTS), write_model
    )

    assert result.imported == 3
    assert result.failed == 2
    assert len(result.errors) == 2
    assert all(strategy is GuestIdStrategy.TOKEN for _, strategy in write_model.created)

    jane, john, max_ = (data for data, _ in write_model.created)
    assert jane.rsvps == {"ev-ceremony": "awaiting-response"}
    assert jane.additional_guests == {"ev-ceremony": 1}
    assert john.email is None
    assert set(john.rsvps) == {"ev-ceremony", "ev-dinner"}
    assert max_.additional_guests == {"ev-ceremony": 0, "ev-dinner": 2}
