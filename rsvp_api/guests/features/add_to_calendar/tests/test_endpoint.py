import pytest

from rsvp_api.guests.features.get_guest_info.router import get_rsvp_read_model
from rsvp_api.guests.tests.inmemory_models import CEREMONY, PARTY, InMemoryGuestStore, make_guest
from rsvp_api.guests.urls import EVENT_CALENDAR_URL

GUEST_ID = "Jane-Doe-abcdefghijkl"


@pytest.mark.asyncio
async def test_download_calendar_for_invited_event(client_factory):
    store = InMemoryGuestStore([make_guest(GUEST_ID)])

    async with client_factory({get_rsvp_read_model: lambda: store}, authenticated=False) as client:
        response = await client.get(EVENT_CALENDAR_URL.format(guest_id=GUEST_ID, event_id=CEREMONY.id))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert 'filename="jane-and-joe_ceremony.ics"' in response.headers["content-disposition"]
    assert "SUMMARY:jane-and-joe: Ceremony" in response.text


@pytest.mark.asyncio
async def test_calendar_needs_an_invitation(client_factory):
    store = InMemoryGuestStore([make_guest(GUEST_ID)])

    async with client_factory({get_rsvp_read_model: lambda: store}, authenticated=False) as client:
        not_invited = await client.get(EVENT_CALENDAR_URL.format(guest_id=GUEST_ID, event_id=PARTY.id))
        unknown_guest = await client.get(EVENT_CALENDAR_URL.format(guest_id="nobody", event_id=CEREMONY.id))

    assert not_invited.status_code == 404
    assert unknown_guest.status_code == 404
    assert unknown_guest.json()["detail"] == "Invalid RSVP link"
