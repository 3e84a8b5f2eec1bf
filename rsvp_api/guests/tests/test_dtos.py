import pytest

from rsvp_api.guests.dtos import (
    GuestDTO,
    InvalidRsvpStatusError,
    RsvpStatus,
    SubGuestDTO,
    normalize_rsvps,
    sort_guests,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("attending", RsvpStatus.ATTENDING),
        ("Attending", RsvpStatus.ATTENDING),
        ("Not Attending", RsvpStatus.NOT_ATTENDING),
        ("not_attending", RsvpStatus.NOT_ATTENDING),
        ("Awaiting Response", RsvpStatus.AWAITING_RESPONSE),
        ("pending", RsvpStatus.AWAITING_RESPONSE),
        ("declined", RsvpStatus.NOT_ATTENDING),
        (RsvpStatus.ATTENDING, RsvpStatus.ATTENDING),
    ],
)
def test_normalize_accepts_legacy_spellings(value, expected):
    assert RsvpStatus.normalize(value) is expected


@pytest.mark.parametrize("value", ["maybe", "", None, 1])
def test_normalize_rejects_unknown_status(value):
    with pytest.raises(InvalidRsvpStatusError):
        RsvpStatus.normalize(value)


def test_normalize_rsvps_maps_every_event():
    assert normalize_rsvps({"e1": "pending", "e2": "attending"}) == {
        "e1": RsvpStatus.AWAITING_RESPONSE,
        "e2": RsvpStatus.ATTENDING,
    }


def test_guest_helpers():
    companion = SubGuestDTO(id="s1", first_name="Kid", last_name="Doe", rsvps={"e1": RsvpStatus.ATTENDING})
    guest = GuestDTO(
        id="Jane-Doe-abcdefghijkl",
        occasion_id="o1",
        first_name="Jane",
        last_name="Doe",
        rsvps={"e1": RsvpStatus.AWAITING_RESPONSE},
        sub_guests=[companion],
    )

    assert guest.full_name == "Jane Doe"
    assert guest.is_invited("e1")
    assert not guest.is_invited("e2")
    assert guest.sub_guest("s1") is companion
    assert guest.sub_guest("missing") is None
    assert guest.rsvp_link.endswith("/rsvp/?c=Jane-Doe-abcdefghijkl")


def test_sort_guests_by_last_then_first_name():
    guests = [
        GuestDTO(id="3", occasion_id="o", first_name="bob", last_name="Smith"),
        GuestDTO(id="1", occasion_id="o", first_name="Zed", last_name="adams"),
        GuestDTO(id="2", occasion_id="o", first_name="Amy", last_name="Smith"),
    ]

    assert [g.id for g in sort_guests(guests)] == ["1", "2", "3"]
