import pytest

from rsvp_api.events.repository.read_models import EventReadModel
from rsvp_api.events.router import get_event_read_model
from rsvp_api.guests.dtos import RsvpStatus
from rsvp_api.guests.features.manage_guests.router import get_guest_read_model
from rsvp_api.guests.tests.inmemory_models import CEREMONY, PARTY, InMemoryGuestStore, make_guest
from rsvp_api.stats import urls


class InMemoryEventReadModel(EventReadModel):
    def __init__(self, events):
        self.events = events

    async def list_events(self, host_id, occasion_id):
        return [e for e in self.events if e.occasion_id == occasion_id and e.created_by == host_id]

    async def get_event(self, host_id, event_id):
        return next(e for e in self.events if e.id == event_id)


@pytest.fixture
def overrides():
    store = InMemoryGuestStore(
        [
            make_guest(),
            make_guest(
                "Bob-Roe-abcdefghijkl",
                first_name="Bob",
                last_name="Roe",
                rsvps={CEREMONY.id: RsvpStatus.ATTENDING, PARTY.id: RsvpStatus.ATTENDING},
                additional_guests={},
                additional_rsvps={},
                sub_guests=[],
                email_sent=True,
                tags=["family"],
            ),
        ]
    )
    events = InMemoryEventReadModel([CEREMONY, PARTY])
    return {get_guest_read_model: lambda: store, get_event_read_model: lambda: events}


@pytest.mark.asyncio
async def test_occasion_stats(client_factory, overrides):
    async with client_factory(overrides) as client:
        response = await client.get(urls.OCCASION_STATS_URL.format(occasion_id="occ1"))

    assert response.status_code == 200
    ceremony, party = response.json()
    assert ceremony == {
        "event_id": CEREMONY.id,
        "event_name": "Ceremony",
        "total_guests": 2,
        "invited": 5,
        "responded": 3,
        "attending": 1,
        "not_attending": 2,
        "pending": 2,
        "not_invited": 0,
    }
    assert party["invited"] == 1
    assert party["attending"] == 1
    assert party["not_invited"] == 1


@pytest.mark.asyncio
async def test_occasion_stats_filtered_by_tag(client_factory, overrides):
    async with client_factory(overrides) as client:
        family = await client.get(
            urls.OCCASION_STATS_URL.format(occasion_id="occ1"), params={"tags": "family"}
        )
        untagged = await client.get(
            urls.OCCASION_STATS_URL.format(occasion_id="occ1"), params={"tags": "untagged"}
        )

    assert family.json()[0]["total_guests"] == 1
    assert family.json()[0]["attending"] == 1
    assert untagged.json()[0]["total_guests"] == 1
    assert untagged.json()[0]["invited"] == 4


@pytest.mark.asyncio
async def test_status_board(client_factory, overrides):
    async with client_factory(overrides) as client:
        ceremony = await client.get(
            urls.EVENT_STATUS_BOARD_URL.format(occasion_id="occ1", event_id=CEREMONY.id)
        )
        party = await client.get(urls.EVENT_STATUS_BOARD_URL.format(occasion_id="occ1", event_id=PARTY.id))
        missing = await client.get(urls.EVENT_STATUS_BOARD_URL.format(occasion_id="occ1", event_id="nope"))

    assert [(row["first_name"], row["status"]) for row in ceremony.json()] == [
        ("Jane", "email-not-sent"),
        ("Kid", "email-not-sent"),
        ("Bob", "attending"),
    ]
    assert ceremony.json()[1]["sub_guest_id"] == "kid"
    assert [row["status"] for row in party.json()] == ["not-invited", "not-invited", "attending"]
    assert missing.status_code == 404
