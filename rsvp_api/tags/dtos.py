from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rsvp_api.models import Tag


class TagNotFoundError(ValueError):
    def __init__(self, tag_id: str) -> None:
        self.tag_id = tag_id
        super().__init__(f"Tag '{tag_id}' not found")


class DuplicateTagNameError(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"A tag named '{name}' already exists for this occasion")


class TagInUseError(Exception):
    def __init__(self, tag_id: str, guest_count: int) -> None:
        self.tag_id = tag_id
        self.guest_count = guest_count
        super().__init__(f"Tag '{tag_id}' is still used by {guest_count} guest(s)")


@dataclass(frozen=True)
class TagDTO:
    id: str
    occasion_id: str
    name: str
    color: str
    created_by: str

    @classmethod
    def from_orm(cls, tag: "Tag") -> "TagDTO":
        return cls(
            id=tag.id,
            occasion_id=tag.occasion_id,
            name=tag.name,
            color=tag.color,
            created_by=tag.created_by,
        )
