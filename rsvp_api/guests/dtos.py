import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from rsvp_api.config.settings import settings

if TYPE_CHECKING:
    from rsvp_api.events.dtos import EventDTO
    from rsvp_api.models import Guest, SubGuest


class GuestNotFoundError(ValueError):
    def __init__(self, guest_id: str) -> None:
        self.guest_id = guest_id
        super().__init__(f"Guest '{guest_id}' not found")


class SubGuestNotFoundError(ValueError):
    def __init__(self, guest_id: str, sub_guest_id: str) -> None:
        self.guest_id = guest_id
        self.sub_guest_id = sub_guest_id
        super().__init__(f"Guest '{guest_id}' has no companion '{sub_guest_id}'")


class InvalidRsvpStatusError(ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"'{value}' is not a valid RSVP status")


class InvalidGuestError(Exception):
    """Raised when a host submits a guest that breaks the invitation rules."""


class RsvpTransitionError(Exception):
    """Raised when a guest asks for an RSVP change that is not allowed."""


class NotInvitedError(RsvpTransitionError):
    def __init__(self, invitee_id: str, event_id: str) -> None:
        self.invitee_id = invitee_id
        self.event_id = event_id
        super().__init__(f"'{invitee_id}' is not invited to event '{event_id}'")


class RsvpStatus(str, Enum):
    ATTENDING = "attending"
    NOT_ATTENDING = "not-attending"
    AWAITING_RESPONSE = "awaiting-response"

    @classmethod
    def normalize(cls, value: "str | RsvpStatus") -> "RsvpStatus":
        """Map any stored or legacy spelling onto the canonical status.

        Older records use "pending", "Awaiting Response", "Not Attending" and so on.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidRsvpStatusError(value)
        key = re.sub(r"[\s_]+", "-", value.strip().lower())
        if key in LEGACY_STATUSES:
            return LEGACY_STATUSES[key]
        try:
            return cls(key)
        except ValueError:
            raise InvalidRsvpStatusError(value) from None


LEGACY_STATUSES = {
    "pending": RsvpStatus.AWAITING_RESPONSE,
    "awaiting": RsvpStatus.AWAITING_RESPONSE,
    "declined": RsvpStatus.NOT_ATTENDING,
}


class DisplayStatus(str, Enum):
    """Labels shown on status boards. Only the first three are ever stored."""

    ATTENDING = "attending"
    NOT_ATTENDING = "not-attending"
    AWAITING_RESPONSE = "awaiting-response"
    EMAIL_NOT_SENT = "email-not-sent"
    NOT_INVITED = "not-invited"


def normalize_rsvps(rsvps: dict[str, "str | RsvpStatus"]) -> dict[str, RsvpStatus]:
    return {event_id: RsvpStatus.normalize(status) for event_id, status in rsvps.items()}


@dataclass(frozen=True)
class SubGuestDTO:
    id: str
    first_name: str
    last_name: str
    rsvps: dict[str, RsvpStatus] = field(default_factory=dict)
    dietary_restrictions: str | None = None
    assigned_by_guest: bool = False

    def is_invited(self, event_id: str) -> bool:
        return event_id in self.rsvps

    @classmethod
    def from_orm(cls, sub_guest: "SubGuest") -> "SubGuestDTO":
        return cls(
            id=sub_guest.id,
            first_name=sub_guest.first_name,
            last_name=sub_guest.last_name,
            rsvps=normalize_rsvps(sub_guest.rsvps or {}),
            dietary_restrictions=sub_guest.dietary_restrictions,
            assigned_by_guest=bool(sub_guest.assigned_by_guest),
        )


@dataclass(frozen=True)
class GuestDTO:
    """Snapshot of a guest and its companions."""

    id: str
    occasion_id: str
    first_name: str
    last_name: str
    occasion_alias: str = ""
    created_by: str = ""
    email: str | None = None
    rsvps: dict[str, RsvpStatus] = field(default_factory=dict)
    sub_guests: list[SubGuestDTO] = field(default_factory=list)
    additional_guests: dict[str, int] = field(default_factory=dict)
    additional_rsvps: dict[str, int] = field(default_factory=dict)
    email_sent: bool = False
    tags: list[str] = field(default_factory=list)
    dietary_restrictions: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def rsvp_link(self) -> str:
        return settings.rsvp_link(self.id)

    def is_invited(self, event_id: str) -> bool:
        return event_id in self.rsvps

    def sub_guest(self, sub_guest_id: str) -> SubGuestDTO | None:
        return next((s for s in self.sub_guests if s.id == sub_guest_id), None)

    @classmethod
    def from_orm(cls, guest: "Guest") -> "GuestDTO":
        return cls(
            id=guest.id,
            occasion_id=guest.occasion_id,
            occasion_alias=guest.occasion_alias,
            created_by=guest.created_by,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            rsvps=normalize_rsvps(guest.rsvps or {}),
            sub_guests=[SubGuestDTO.from_orm(s) for s in guest.sub_guests],
            additional_guests=dict(guest.additional_guests or {}),
            additional_rsvps=dict(guest.additional_rsvps or {}),
            email_sent=bool(guest.email_sent),
            tags=list(guest.tags or []),
            dietary_restrictions=guest.dietary_restrictions,
        )


@dataclass(frozen=True)
class SubGuestInputDTO:
    first_name: str
    last_name: str
    rsvps: dict[str, str] = field(default_factory=dict)
    dietary_restrictions: str | None = None
    assigned_by_guest: bool = False
    id: str | None = None


@dataclass(frozen=True)
class GuestCreateDTO:
    first_name: str
    last_name: str
    email: str | None = None
    rsvps: dict[str, str] = field(default_factory=dict)
    sub_guests: list[SubGuestInputDTO] = field(default_factory=list)
    additional_guests: dict[str, int] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    dietary_restrictions: str | None = None


@dataclass(frozen=True)
class RsvpResponseDTO:
    """One status change inside a batch submission."""

    event_id: str
    status: RsvpStatus
    sub_guest_id: str | None = None


@dataclass(frozen=True)
class RsvpSubmissionDTO:
    responses: list[RsvpResponseDTO] = field(default_factory=list)
    additional_counts: dict[str, int] = field(default_factory=dict)
    dietary_restrictions: str | None = None
    sub_guest_dietary_restrictions: dict[str, str | None] = field(default_factory=dict)


class GuestIdStrategy(str, Enum):
    """``name`` builds a readable id from the guest's name, ``token`` a random one."""

    NAME = "name"
    TOKEN = "token"


@dataclass(frozen=True)
class InvitationDTO:
    """What a guest sees when opening their RSVP link."""

    guest: GuestDTO
    occasion_name: str
    occasion_alias: str
    hosts: list[str] = field(default_factory=list)
    invite_image_url: str | None = None
    events: list["EventDTO"] = field(default_factory=list)


def sort_guests(guests: list[GuestDTO]) -> list[GuestDTO]:
    return sorted(guests, key=lambda g: (g.last_name.casefold(), g.first_name.casefold(), g.id))
