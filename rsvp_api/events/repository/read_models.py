import abc
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rsvp_api.config.database import async_session_manager
from rsvp_api.events.dtos import EventDTO, EventNotFoundError, sort_events
from rsvp_api.models import Event


class EventReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_events(self, host_id: str, occasion_id: str) -> list[EventDTO]:
        """Events of an occasion sorted by start time."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_event(self, host_id: str, event_id: str) -> EventDTO:
        raise NotImplementedError


class SqlEventReadModel(EventReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def list_events(self, host_id: str, occasion_id: str) -> list[EventDTO]:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Event).where(Event.occasion_id == occasion_id, Event.created_by == host_id)
            )
            return sort_events([EventDTO.from_orm(e) for e in result.scalars().all()])

    async def get_event(self, host_id: str, event_id: str) -> EventDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await session.get(Event, event_id)
            if event is None or event.created_by != host_id:
                raise EventNotFoundError(event_id)
            return EventDTO.from_orm(event)
