"""Attendance statistics per event.

Pure functions over the guest list of an occasion. Nothing is cached or stored;
the numbers are recomputed from the guests every time.

For one event, a guest contributes:

* to ``invited``: itself, every companion invited to the event and the full
  plus-one cap;
* to ``responded``: itself and companions once they answered, plus the full
  plus-one cap;
* to ``attending``: itself and companions who said yes, plus the plus-ones it
  is actually bringing;
* to ``not_attending``: itself and companions who said no, plus the unused part
  of the plus-one cap.

``pending`` is always ``invited - responded`` and ``not_invited`` counts primary
guests only.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from rsvp_api.guests.dtos import DisplayStatus, GuestDTO, RsvpStatus

UNTAGGED = "untagged"

RESPONDED_STATUSES = frozenset({RsvpStatus.ATTENDING, RsvpStatus.NOT_ATTENDING})


@dataclass(frozen=True)
class EventStats:
    event_id: str
    total_guests: int
    invited: int
    responded: int
    attending: int
    not_attending: int
    pending: int
    not_invited: int


@dataclass(frozen=True)
class StatusBoardEntry:
    guest_id: str
    first_name: str
    last_name: str
    status: DisplayStatus
    sub_guest_id: str | None = None


def filter_guests_by_tags(
    guests: Iterable[GuestDTO], tags: Sequence[str] | None = None
) -> list[GuestDTO]:
    """Keep guests carrying any of ``tags``. ``untagged`` matches guests without tags."""
    guests = list(guests)
    if not tags:
        return guests
    wanted = set(tags)
    include_untagged = UNTAGGED in wanted
    return [
        guest
        for guest in guests
        if wanted.intersection(guest.tags) or (include_untagged and not guest.tags)
    ]


def get_event_stats(
    guests: Iterable[GuestDTO], event_id: str, tags: Sequence[str] | None = None
) -> EventStats:
    considered = filter_guests_by_tags(guests, tags)
    event_guests = [guest for guest in considered if guest.is_invited(event_id)]

    invited = responded = attending = not_attending = 0
    for guest in event_guests:
        statuses = [guest.rsvps[event_id]] + [
            sub_guest.rsvps[event_id]
            for sub_guest in guest.sub_guests
            if sub_guest.is_invited(event_id)
        ]
        cap = max(0, guest.additional_guests.get(event_id, 0))
        bringing = min(max(0, guest.additional_rsvps.get(event_id, 0)), cap)

        invited += len(statuses) + cap
        responded += sum(1 for status in statuses if status in RESPONDED_STATUSES) + cap
        attending += statuses.count(RsvpStatus.ATTENDING) + bringing
        not_attending += statuses.count(RsvpStatus.NOT_ATTENDING) + (cap - bringing)

    return EventStats(
        event_id=event_id,
        total_guests=len(considered),
        invited=invited,
        responded=responded,
        attending=attending,
        not_attending=not_attending,
        pending=invited - responded,
        not_invited=len(considered) - len(event_guests),
    )


def get_all_event_stats(
    guests: Iterable[GuestDTO],
    event_ids: Sequence[str],
    tags: Sequence[str] | None = None,
) -> list[EventStats]:
    guests = list(guests)
    return [get_event_stats(guests, event_id, tags) for event_id in event_ids]


def display_status(
    status: RsvpStatus | None, email_sent: bool
) -> DisplayStatus:
    if status is None:
        return DisplayStatus.NOT_INVITED
    if status == RsvpStatus.AWAITING_RESPONSE and not email_sent:
        return DisplayStatus.EMAIL_NOT_SENT
    return DisplayStatus(status.value)


def event_status_board(guests: Iterable[GuestDTO], event_id: str) -> list[StatusBoardEntry]:
    """One row per guest and companion with the label a host should see."""
    board = []
    for guest in guests:
        board.append(
            StatusBoardEntry(
                guest_id=guest.id,
                first_name=guest.first_name,
                last_name=guest.last_name,
                status=display_status(guest.rsvps.get(event_id), guest.email_sent),
            )
        )
        for sub_guest in guest.sub_guests:
            board.append(
                StatusBoardEntry(
                    guest_id=guest.id,
                    sub_guest_id=sub_guest.id,
                    first_name=sub_guest.first_name,
                    last_name=sub_guest.last_name,
                    status=display_status(sub_guest.rsvps.get(event_id), guest.email_sent),
                )
            )
    return board
