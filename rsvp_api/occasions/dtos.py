import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rsvp_api.models import Occasion

ALIAS_MIN_LENGTH = 3
ALIAS_MAX_LENGTH = 64
ALIAS_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class OccasionNotFoundError(ValueError):
    def __init__(self, occasion_ref: str) -> None:
        self.occasion_ref = occasion_ref
        super().__init__(f"Occasion '{occasion_ref}' not found")


class InvalidAliasError(Exception):
    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(
            f"'{alias}' is not a valid alias: use {ALIAS_MIN_LENGTH}-{ALIAS_MAX_LENGTH} "
            "lowercase letters, digits and single hyphens"
        )


class AliasTakenError(Exception):
    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f"Alias '{alias}' is already taken")


def normalize_alias(alias: str) -> str:
    return (alias or "").strip().lower()


def validate_alias(alias: str) -> str:
    """Return the normalized alias or raise InvalidAliasError."""
    normalized = normalize_alias(alias)
    if not ALIAS_MIN_LENGTH <= len(normalized) <= ALIAS_MAX_LENGTH or not ALIAS_PATTERN.match(
        normalized
    ):
        raise InvalidAliasError(alias)
    return normalized


@dataclass(frozen=True)
class OccasionDTO:
    id: str
    name: str
    alias: str
    created_by: str
    hosts: list[str] = field(default_factory=list)
    description: str | None = None
    invite_image_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_orm(cls, occasion: "Occasion") -> "OccasionDTO":
        return cls(
            id=occasion.id,
            name=occasion.name,
            alias=occasion.alias,
            created_by=occasion.created_by,
            hosts=list(occasion.hosts or []),
            description=occasion.description,
            invite_image_url=occasion.invite_image_url,
            created_at=occasion.created_at,
        )


@dataclass(frozen=True)
class OccasionCreateDTO:
    name: str
    alias: str
    hosts: list[str] = field(default_factory=list)
    description: str | None = None
    invite_image_url: str | None = None


@dataclass(frozen=True)
class CascadeDeleteResultDTO:
    """Rows removed by deleting an occasion."""

    occasion_id: str
    events: int = 0
    guests: int = 0
    sub_guests: int = 0
    tags: int = 0
