"""Event write operations. Return DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rsvp_api.config.database import async_session_manager
from rsvp_api.events.dtos import (
    DuplicateEventNameError,
    EventCreateDTO,
    EventDTO,
    EventNotFoundError,
    UnknownAliasError,
    event_name_key,
)
from rsvp_api.models import AliasIndex, Event, Occasion
from rsvp_api.occasions.dtos import OccasionNotFoundError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "start_date_time",
        "end_date_time",
        "timezone",
        "location",
        "description",
        "additional_fields",
        "invite_image_url",
    }
)


class EventWriteModel(ABC):
    @abstractmethod
    async def create_event(self, host_id: str, occasion_id: str, data: EventCreateDTO) -> EventDTO:
        """Raises OccasionNotFoundError or DuplicateEventNameError."""
        raise NotImplementedError

    @abstractmethod
    async def update_event(self, host_id: str, event_id: str, changes: dict[str, Any]) -> EventDTO:
        """Partial update.

        A changed ``occasion_alias`` must be an alias the host owns. It is rewritten
        on every event of the same occasion and host that carried the old one, in a
        single statement. Raises UnknownAliasError otherwise.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_event(self, host_id: str, event_id: str) -> None:
        """Guest RSVPs pointing at the event are left as they are."""
        raise NotImplementedError


class SqlEventWriteModel(EventWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def _get_owned(self, session: AsyncSession, host_id: str, event_id: str) -> Event:
        event = await session.get(Event, event_id)
        if event is None or event.created_by != host_id:
            raise EventNotFoundError(event_id)
        return event

    async def _ensure_unique_name(
        self, session: AsyncSession, occasion_id: str, name: str, exclude_id: str | None = None
    ) -> None:
        result = await session.execute(
            select(Event.id, Event.name).where(Event.occasion_id == occasion_id)
        )
        wanted = event_name_key(name)
        for other_id, other_name in result.all():
            if other_id != exclude_id and event_name_key(other_name) == wanted:
                raise DuplicateEventNameError(name)

    async def _flush(self, session: AsyncSession, name: str) -> None:
        try:
            await session.flush()
        except IntegrityError as e:
            logger.warning(f"Event name '{name}' claimed concurrently: {e.orig}")
            raise DuplicateEventNameError(name) from e

    async def create_event(self, host_id: str, occasion_id: str, data: EventCreateDTO) -> EventDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            occasion = await session.get(Occasion, occasion_id)
            if occasion is None or occasion.created_by != host_id:
                raise OccasionNotFoundError(occasion_id)

            name = data.name.strip()
            await self._ensure_unique_name(session, occasion_id, name)

            event = Event(
                occasion_id=occasion.id,
                occasion_alias=occasion.alias,
                name=name,
                start_date_time=data.start_date_time,
                end_date_time=data.end_date_time,
                timezone=data.timezone or "UTC",
                location=data.location,
                description=data.description,
                additional_fields=dict(data.additional_fields or {}),
                invite_image_url=data.invite_image_url,
                created_by=host_id,
            )
            session.add(event)
            await self._flush(session, name)
            await session.refresh(event)
            return EventDTO.from_orm(event)

    async def update_event(self, host_id: str, event_id: str, changes: dict[str, Any]) -> EventDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await self._get_owned(session, host_id, event_id)

            if changes.get("name") is not None:
                changes = {**changes, "name": changes["name"].strip()}
                await self._ensure_unique_name(
                    session, event.occasion_id, changes["name"], exclude_id=event.id
                )

            for key, value in changes.items():
                if key not in UPDATABLE_FIELDS:
                    continue
                if key == "additional_fields":
                    value = dict(value or {})
                setattr(event, key, value)
            await self._flush(session, event.name)

            new_alias = changes.get("occasion_alias")
            if new_alias and new_alias != event.occasion_alias:
                owned = await session.get(AliasIndex, new_alias)
                if owned is None or owned.created_by != host_id:
                    raise UnknownAliasError(new_alias)

                old_alias = event.occasion_alias
                result = await session.execute(
                    update(Event)
                    .where(
                        Event.occasion_alias == old_alias,
                        Event.occasion_id == event.occasion_id,
                        Event.created_by == host_id,
                    )
                    .values(occasion_alias=new_alias)
                )
                logger.info(
                    f"Moved {result.rowcount} events from alias '{old_alias}' to '{new_alias}'"
                )

            await session.refresh(event)
            return EventDTO.from_orm(event)

    async def delete_event(self, host_id: str, event_id: str) -> None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await self._get_owned(session, host_id, event_id)
            await session.delete(event)
            await session.flush()
            logger.info(f"Deleted event {event_id} from occasion {event.occasion_id}")
