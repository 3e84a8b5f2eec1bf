"""Bulk guest import from CSV.

Expected columns: ``firstName,lastName,email[,eventType]``. The first line is a
header and is skipped. ``eventType`` lists event names separated by ``;``, each
optionally followed by ``:N`` to allow N plus-ones, e.g. ``Ceremony:1;Dinner``.
An empty ``eventType`` invites the guest to every event of the occasion.

Bad rows are counted and skipped; they never abort the whole file.
"""

import csv
import io
import logging
from dataclasses import dataclass, field

from rsvp_api.events.dtos import EventDTO, event_name_key
from rsvp_api.events.repository.read_models import EventReadModel
from rsvp_api.guests.dtos import GuestCreateDTO, GuestIdStrategy, InvalidGuestError, RsvpStatus
from rsvp_api.guests.repository.write_models import GuestWriteModel

logger = logging.getLogger(__name__)


class RowError(Exception):
    pass


@dataclass(frozen=True)
class GuestRow:
    line_number: int
    first_name: str
    last_name: str
    email: str | None = None
    # event name -> plus-one cap; None means every event
    invitations: dict[str, int] | None = None


@dataclass(frozen=True)
class ImportResultDTO:
    imported: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


def _parse_invitations(value: str) -> dict[str, int] | None:
    value = value.strip()
    if not value:
        return None
    invitations = {}
    for part in value.split(";"):
        name, _, cap = part.partition(":")
        name = name.strip()
        if not name:
            continue
        try:
            invitations[name] = max(0, int(cap)) if cap.strip() else 0
        except ValueError:
            raise RowError(f"invalid plus-one count '{cap}' for '{name}'") from None
    return invitations


def parse_row(line_number: int, cells: list[str]) -> GuestRow:
    cells = [cell.strip() for cell in cells]
    first_name = cells[0] if len(cells) > 0 else ""
    last_name = cells[1] if len(cells) > 1 else ""
    if not first_name or not last_name:
        raise RowError("first and last name are required")
    return GuestRow(
        line_number=line_number,
        first_name=first_name,
        last_name=last_name,
        email=(cells[2] if len(cells) > 2 else "") or None,
        invitations=_parse_invitations(cells[3]) if len(cells) > 3 else None,
    )


def resolve_invitations(
    row: GuestRow, events: list[EventDTO]
) -> tuple[dict[str, str], dict[str, int]]:
    """Turn event names into ``rsvps`` and ``additional_guests`` keyed by event id."""
    if row.invitations is None:
        return {e.id: RsvpStatus.AWAITING_RESPONSE.value for e in events}, {}

    by_name = {event_name_key(e.name): e for e in events}
    rsvps, additional_guests = {}, {}
    for name, cap in row.invitations.items():
        event = by_name.get(event_name_key(name))
        if event is None:
            logger.warning(f"Line {row.line_number}: unknown event '{name}'")
            continue
        rsvps[event.id] = RsvpStatus.AWAITING_RESPONSE.value
        additional_guests[event.id] = cap
    if not rsvps:
        raise RowError("no known event in eventType")
    return rsvps, additional_guests


async def import_guests(
    host_id: str,
    occasion_id: str,
    csv_text: str,
    event_read_model: EventReadModel,
    guest_write_model: GuestWriteModel,
) -> ImportResultDTO:
    events = await event_read_model.list_events(host_id, occasion_id)
    imported, failed, errors = 0, 0, []

    reader = csv.reader(io.StringIO(csv_text))
    next(reader, None)
    for line_number, cells in enumerate(reader, start=2):
        if not any(cell.strip() for cell in cells):
            continue
        try:
            row = parse_row(line_number, cells)
            rsvps, additional_guests = resolve_invitations(row, events)
            await guest_write_model.create_guest(
                host_id,
                occasion_id,
                GuestCreateDTO(
                    first_name=row.first_name,
                    last_name=row.last_name,
                    email=row.email,
                    rsvps=rsvps,
                    additional_guests=additional_guests,
                ),
                id_strategy=GuestIdStrategy.TOKEN,
            )
        except (RowError, InvalidGuestError) as e:
            failed += 1
            errors.append(f"line {line_number}: {e}")
            continue
        imported += 1

    logger.info(f"Imported {imported} guests into occasion {occasion_id}, {failed} failed")
    return ImportResultDTO(imported=imported, failed=failed, errors=errors)
