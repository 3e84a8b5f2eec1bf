from pydantic import BaseModel, ConfigDict, field_validator

from rsvp_api.guests.dtos import RsvpStatus, normalize_rsvps


class RsvpMapMixin(BaseModel):
    """Accepts legacy status spellings and stores the canonical ones."""

    @field_validator("rsvps", mode="before", check_fields=False)
    @classmethod
    def normalize_statuses(cls, value):
        if isinstance(value, dict):
            return normalize_rsvps(value)
        return value


class SubGuestPayload(RsvpMapMixin):
    id: str | None = None
    first_name: str
    last_name: str
    rsvps: dict[str, RsvpStatus] = {}
    dietary_restrictions: str | None = None
    assigned_by_guest: bool = False


class SubGuestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    rsvps: dict[str, RsvpStatus]
    dietary_restrictions: str | None = None
    assigned_by_guest: bool = False


class GuestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    occasion_id: str
    occasion_alias: str
    first_name: str
    last_name: str
    email: str | None = None
    rsvps: dict[str, RsvpStatus]
    sub_guests: list[SubGuestResponse]
    additional_guests: dict[str, int]
    additional_rsvps: dict[str, int]
    email_sent: bool
    tags: list[str]
    dietary_restrictions: str | None = None
    rsvp_link: str
