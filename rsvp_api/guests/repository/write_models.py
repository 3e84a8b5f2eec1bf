"""Guest write models. Return DTOs, never ORM models.

``GuestWriteModel`` is the host side: full edits of a guest. ``RsvpWriteModel`` is
the guest side, reached through the capability link, and may only touch RSVP
answers, plus-one counts and dietary notes.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from functools import partial
from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from rsvp_api.config.database import async_session_manager
from rsvp_api.guests import rsvp_state
from rsvp_api.guests.dtos import (
    GuestCreateDTO,
    GuestDTO,
    GuestIdStrategy,
    GuestNotFoundError,
    InvalidGuestError,
    RsvpStatus,
    RsvpSubmissionDTO,
    SubGuestDTO,
    SubGuestInputDTO,
    normalize_rsvps,
)
from rsvp_api.ids import generate_guest_id, random_token
from rsvp_api.models import Guest, Occasion, SubGuest
from rsvp_api.occasions.dtos import OccasionNotFoundError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "rsvps",
        "sub_guests",
        "additional_guests",
        "additional_rsvps",
        "email_sent",
        "tags",
        "dietary_restrictions",
    }
)


def _required_name(value: str | None, label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidGuestError(f"{label} is required")
    return value


def _build_sub_guests(inputs: list[SubGuestInputDTO]) -> list[SubGuestDTO]:
    sub_guests = []
    for item in inputs:
        sub_guests.append(
            SubGuestDTO(
                id=item.id or random_token(),
                first_name=_required_name(item.first_name, "Companion first name"),
                last_name=_required_name(item.last_name, "Companion last name"),
                rsvps=normalize_rsvps(item.rsvps),
                dietary_restrictions=item.dietary_restrictions,
                assigned_by_guest=item.assigned_by_guest,
            )
        )
    ids = [s.id for s in sub_guests]
    if len(ids) != len(set(ids)):
        raise InvalidGuestError("Companion ids must be unique within a guest")
    return sub_guests


def _sync_sub_guests(guest: Guest, sub_guests: list[SubGuestDTO]) -> None:
    """Reconcile the stored companions with ``sub_guests``, keeping rows by id."""
    existing = {s.id: s for s in guest.sub_guests}
    rows = []
    for position, dto in enumerate(sub_guests):
        row = existing.get(dto.id) or SubGuest(id=dto.id)
        row.position = position
        row.first_name = dto.first_name
        row.last_name = dto.last_name
        row.rsvps = {event_id: status.value for event_id, status in dto.rsvps.items()}
        row.dietary_restrictions = dto.dietary_restrictions
        row.assigned_by_guest = dto.assigned_by_guest
        rows.append(row)
    guest.sub_guests = rows


def _write_rsvp_fields(guest: Guest, snapshot: GuestDTO) -> None:
    """Persist only what a guest is allowed to change about themselves."""
    guest.rsvps = {event_id: status.value for event_id, status in snapshot.rsvps.items()}
    guest.additional_rsvps = dict(snapshot.additional_rsvps)
    guest.dietary_restrictions = snapshot.dietary_restrictions
    by_id = {s.id: s for s in snapshot.sub_guests}
    for row in guest.sub_guests:
        dto = by_id.get(row.id)
        if dto is None:
            continue
        row.rsvps = {event_id: status.value for event_id, status in dto.rsvps.items()}
        row.dietary_restrictions = dto.dietary_restrictions


class GuestWriteModel(ABC):
    @abstractmethod
    async def create_guest(
        self,
        host_id: str,
        occasion_id: str,
        data: GuestCreateDTO,
        id_strategy: GuestIdStrategy = GuestIdStrategy.NAME,
    ) -> GuestDTO:
        """Create a guest invited to every event keyed in ``data.rsvps``.

        Plus-one caps default to 0 and every invited event starts with a
        plus-one count of 0.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_guest(self, host_id: str, guest_id: str, changes: dict[str, Any]) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_guest(self, host_id: str, guest_id: str) -> None:
        """Deleting a guest is the only way to revoke its RSVP link."""
        raise NotImplementedError

    @abstractmethod
    async def mark_email_sent(self, guest_ids: list[str]) -> int:
        raise NotImplementedError


class SqlGuestWriteModel(GuestWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def _get_owned(self, session: AsyncSession, host_id: str, guest_id: str) -> Guest:
        guest = await session.get(Guest, guest_id)
        if guest is None or guest.created_by != host_id:
            raise GuestNotFoundError(guest_id)
        return guest

    async def create_guest(
        self,
        host_id: str,
        occasion_id: str,
        data: GuestCreateDTO,
        id_strategy: GuestIdStrategy = GuestIdStrategy.NAME,
    ) -> GuestDTO:
        first_name = _required_name(data.first_name, "First name")
        last_name = _required_name(data.last_name, "Last name")
        rsvps = normalize_rsvps(data.rsvps)
        sub_guests = _build_sub_guests(data.sub_guests)
        rsvp_state.validate_sub_guest_invitations(rsvps, sub_guests)
        additional_guests, _ = rsvp_state.normalize_additional_maps(
            rsvps, data.additional_guests, {}
        )

        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            occasion = await session.get(Occasion, occasion_id)
            if occasion is None or occasion.created_by != host_id:
                raise OccasionNotFoundError(occasion_id)

            if id_strategy == GuestIdStrategy.TOKEN:
                guest_id = random_token()
            else:
                guest_id = generate_guest_id(first_name, last_name)

            guest = Guest(
                id=guest_id,
                occasion_id=occasion.id,
                occasion_alias=occasion.alias,
                created_by=host_id,
                first_name=first_name,
                last_name=last_name,
                email=(data.email or "").strip() or None,
                rsvps={event_id: status.value for event_id, status in rsvps.items()},
                additional_guests=additional_guests,
                additional_rsvps={event_id: 0 for event_id in rsvps},
                email_sent=False,
                tags=list(data.tags),
                dietary_restrictions=data.dietary_restrictions,
                sub_guests=[],
            )
            _sync_sub_guests(guest, sub_guests)
            session.add(guest)
            await session.flush()

            logger.info(f"Created guest {guest.id} for occasion {occasion_id}")
            return GuestDTO.from_orm(guest)

    async def update_guest(self, host_id: str, guest_id: str, changes: dict[str, Any]) -> GuestDTO:
        changes = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}

        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await self._get_owned(session, host_id, guest_id)
            current = GuestDTO.from_orm(guest)

            rsvps = normalize_rsvps(changes.get("rsvps", current.rsvps))
            if "sub_guests" in changes:
                sub_guests = _build_sub_guests(changes["sub_guests"])
                rsvp_state.validate_sub_guest_invitations(rsvps, sub_guests)
            else:
                # uninviting the guest also uninvites its companions
                sub_guests = [
                    SubGuestDTO(
                        id=s.id,
                        first_name=s.first_name,
                        last_name=s.last_name,
                        rsvps={e: st for e, st in s.rsvps.items() if e in rsvps},
                        dietary_restrictions=s.dietary_restrictions,
                        assigned_by_guest=s.assigned_by_guest,
                    )
                    for s in current.sub_guests
                ]

            additional_rsvps = dict(changes.get("additional_rsvps", current.additional_rsvps))
            for event_id in rsvps:
                if event_id not in current.rsvps:
                    additional_rsvps.setdefault(event_id, 0)
            additional_guests, additional_rsvps = rsvp_state.normalize_additional_maps(
                rsvps,
                changes.get("additional_guests", current.additional_guests),
                additional_rsvps,
            )
            # only an attending guest brings plus-ones
            for event_id, status in rsvps.items():
                if status != RsvpStatus.ATTENDING:
                    additional_rsvps.pop(event_id, None)

            if "first_name" in changes:
                guest.first_name = _required_name(changes["first_name"], "First name")
            if "last_name" in changes:
                guest.last_name = _required_name(changes["last_name"], "Last name")
            if "email" in changes:
                guest.email = (changes["email"] or "").strip() or None
            if "email_sent" in changes:
                guest.email_sent = bool(changes["email_sent"])
            if "tags" in changes:
                guest.tags = list(changes["tags"] or [])
            if "dietary_restrictions" in changes:
                guest.dietary_restrictions = changes["dietary_restrictions"]

            guest.rsvps = {event_id: status.value for event_id, status in rsvps.items()}
            guest.additional_guests = additional_guests
            guest.additional_rsvps = additional_rsvps
            _sync_sub_guests(guest, sub_guests)
            await session.flush()

            return GuestDTO.from_orm(guest)

    async def delete_guest(self, host_id: str, guest_id: str) -> None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await self._get_owned(session, host_id, guest_id)
            await session.delete(guest)
            await session.flush()
            logger.info(f"Deleted guest {guest_id}")

    async def mark_email_sent(self, guest_ids: list[str]) -> int:
        if not guest_ids:
            return 0
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                update(Guest).where(Guest.id.in_(guest_ids)).values(email_sent=True)
            )
            return result.rowcount


class RsvpWriteModel(ABC):
    @abstractmethod
    async def set_status(
        self,
        guest_id: str,
        event_id: str,
        status: RsvpStatus,
        sub_guest_id: str | None = None,
    ) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def set_additional_count(self, guest_id: str, event_id: str, count: int) -> GuestDTO:
        """Stored count is clamped to the plus-one cap of the event."""
        raise NotImplementedError

    @abstractmethod
    async def set_dietary_restrictions(
        self, guest_id: str, dietary_restrictions: str | None, sub_guest_id: str | None = None
    ) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def confirm(self, guest_id: str, submission: RsvpSubmissionDTO) -> GuestDTO:
        """Apply a whole RSVP form in one write."""
        raise NotImplementedError


class SqlRsvpWriteModel(RsvpWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def _transition(self, guest_id: str, apply: Callable[[GuestDTO], GuestDTO]) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            if guest is None:
                raise GuestNotFoundError(guest_id)

            updated = apply(GuestDTO.from_orm(guest))
            _write_rsvp_fields(guest, updated)
            await session.flush()
            return GuestDTO.from_orm(guest)

    async def set_status(
        self,
        guest_id: str,
        event_id: str,
        status: RsvpStatus,
        sub_guest_id: str | None = None,
    ) -> GuestDTO:
        if sub_guest_id:
            apply = partial(
                rsvp_state.set_sub_guest_status,
                sub_guest_id=sub_guest_id,
                event_id=event_id,
                status=status,
            )
        else:
            apply = partial(rsvp_state.set_guest_status, event_id=event_id, status=status)
        guest = await self._transition(guest_id, apply)
        logger.info(f"Guest {guest_id} answered {RsvpStatus.normalize(status).value} for {event_id}")
        return guest

    async def set_additional_count(self, guest_id: str, event_id: str, count: int) -> GuestDTO:
        return await self._transition(
            guest_id, partial(rsvp_state.set_additional_count, event_id=event_id, count=count)
        )

    async def set_dietary_restrictions(
        self, guest_id: str, dietary_restrictions: str | None, sub_guest_id: str | None = None
    ) -> GuestDTO:
        return await self._transition(
            guest_id,
            partial(
                rsvp_state.set_dietary_restrictions,
                dietary_restrictions=dietary_restrictions,
                sub_guest_id=sub_guest_id,
            ),
        )

    async def confirm(self, guest_id: str, submission: RsvpSubmissionDTO) -> GuestDTO:
        return await self._transition(
            guest_id, partial(rsvp_state.apply_responses, submission=submission)
        )
