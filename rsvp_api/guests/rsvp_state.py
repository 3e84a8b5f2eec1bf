"""RSVP transitions for a guest, its companions and its plus-ones.

Every function takes a guest snapshot and returns a new one. Nothing here touches
the database; the write models persist whatever comes back.

Each (guest or companion, event) pair starts at ``awaiting-response`` when invited
and can move freely between the three statuses afterwards.
"""

from dataclasses import replace

from rsvp_api.guests.dtos import (
    GuestDTO,
    InvalidGuestError,
    NotInvitedError,
    RsvpStatus,
    RsvpSubmissionDTO,
    RsvpTransitionError,
    SubGuestDTO,
    SubGuestNotFoundError,
)


def clamp_additional_count(count: int, cap: int) -> int:
    return max(0, min(int(count), max(0, int(cap))))


def _require_invited(guest: GuestDTO, event_id: str) -> None:
    if not guest.is_invited(event_id):
        raise NotInvitedError(guest.id, event_id)


def _require_sub_guest(guest: GuestDTO, sub_guest_id: str) -> SubGuestDTO:
    sub_guest = guest.sub_guest(sub_guest_id)
    if sub_guest is None:
        raise SubGuestNotFoundError(guest.id, sub_guest_id)
    return sub_guest


def _replace_sub_guest(guest: GuestDTO, updated: SubGuestDTO) -> GuestDTO:
    return replace(
        guest,
        sub_guests=[updated if s.id == updated.id else s for s in guest.sub_guests],
    )


def set_guest_status(
    guest: GuestDTO, event_id: str, status: "RsvpStatus | str"
) -> GuestDTO:
    status = RsvpStatus.normalize(status)
    _require_invited(guest, event_id)

    rsvps = {**guest.rsvps, event_id: status}
    additional_rsvps = dict(guest.additional_rsvps)
    if status == RsvpStatus.ATTENDING:
        if guest.additional_guests.get(event_id, 0) > 0:
            additional_rsvps.setdefault(event_id, 0)
    else:
        # a guest who is not coming brings nobody; the chosen count is forgotten
        additional_rsvps.pop(event_id, None)

    return replace(guest, rsvps=rsvps, additional_rsvps=additional_rsvps)


def set_sub_guest_status(
    guest: GuestDTO, sub_guest_id: str, event_id: str, status: "RsvpStatus | str"
) -> GuestDTO:
    status = RsvpStatus.normalize(status)
    sub_guest = _require_sub_guest(guest, sub_guest_id)
    if not sub_guest.is_invited(event_id):
        raise NotInvitedError(sub_guest_id, event_id)

    updated = replace(sub_guest, rsvps={**sub_guest.rsvps, event_id: status})
    return _replace_sub_guest(guest, updated)


def set_additional_count(guest: GuestDTO, event_id: str, count: int) -> GuestDTO:
    _require_invited(guest, event_id)
    if guest.rsvps[event_id] != RsvpStatus.ATTENDING:
        raise RsvpTransitionError("Additional guests can only be added by an attending guest")

    cap = guest.additional_guests.get(event_id, 0)
    return replace(
        guest,
        additional_rsvps={
            **guest.additional_rsvps,
            event_id: clamp_additional_count(count, cap),
        },
    )


def set_dietary_restrictions(
    guest: GuestDTO, dietary_restrictions: str | None, sub_guest_id: str | None = None
) -> GuestDTO:
    dietary_restrictions = (dietary_restrictions or "").strip() or None
    if sub_guest_id is None:
        return replace(guest, dietary_restrictions=dietary_restrictions)

    sub_guest = _require_sub_guest(guest, sub_guest_id)
    return _replace_sub_guest(
        guest, replace(sub_guest, dietary_restrictions=dietary_restrictions)
    )


def apply_responses(guest: GuestDTO, submission: RsvpSubmissionDTO) -> GuestDTO:
    """Apply a whole RSVP form at once.

    Statuses go first so plus-one counts are checked against the new answers.
    """
    for response in submission.responses:
        if response.sub_guest_id:
            guest = set_sub_guest_status(
                guest, response.sub_guest_id, response.event_id, response.status
            )
        else:
            guest = set_guest_status(guest, response.event_id, response.status)

    for event_id, count in submission.additional_counts.items():
        guest = set_additional_count(guest, event_id, count)

    if submission.dietary_restrictions is not None:
        guest = set_dietary_restrictions(guest, submission.dietary_restrictions)
    for sub_guest_id, text in submission.sub_guest_dietary_restrictions.items():
        guest = set_dietary_restrictions(guest, text, sub_guest_id=sub_guest_id)

    return guest


def normalize_additional_maps(
    rsvps: dict[str, object],
    additional_guests: dict[str, int],
    additional_rsvps: dict[str, int],
) -> tuple[dict[str, int], dict[str, int]]:
    """Keep plus-one caps and counts in step with the invited events.

    Keys for events the guest is not invited to are dropped, caps are never
    negative and counts stay within ``[0, cap]``.
    """
    caps = {event_id: max(0, int(additional_guests.get(event_id) or 0)) for event_id in rsvps}
    counts = {
        event_id: clamp_additional_count(additional_rsvps[event_id], caps[event_id])
        for event_id in rsvps
        if additional_rsvps.get(event_id) is not None
    }
    return caps, counts


def validate_sub_guest_invitations(
    rsvps: dict[str, object], sub_guests: list[SubGuestDTO]
) -> None:
    """A companion may only be invited where its guest is invited."""
    for sub_guest in sub_guests:
        extra = set(sub_guest.rsvps) - set(rsvps)
        if extra:
            raise InvalidGuestError(
                f"{sub_guest.first_name} {sub_guest.last_name} is invited to "
                f"{', '.join(sorted(extra))} but their guest is not"
            )
