import abc
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rsvp_api.config.database import async_session_manager
from rsvp_api.events.dtos import EventDTO, sort_events
from rsvp_api.guests.dtos import GuestDTO, GuestNotFoundError, InvitationDTO, sort_guests
from rsvp_api.models import Event, Guest, Occasion


class GuestReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_guests(self, host_id: str, occasion_id: str) -> list[GuestDTO]:
        """Guests of an occasion sorted by last name."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_guest(self, host_id: str, guest_id: str) -> GuestDTO:
        raise NotImplementedError


class RsvpReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_invitation(self, guest_id: str) -> InvitationDTO:
        """Look a guest up by its capability id. Raises GuestNotFoundError."""
        raise NotImplementedError


class SqlGuestReadModel(GuestReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def list_guests(self, host_id: str, occasion_id: str) -> list[GuestDTO]:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Guest).where(Guest.occasion_id == occasion_id, Guest.created_by == host_id)
            )
            return sort_guests([GuestDTO.from_orm(g) for g in result.scalars().all()])

    async def get_guest(self, host_id: str, guest_id: str) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            if guest is None or guest.created_by != host_id:
                raise GuestNotFoundError(guest_id)
            return GuestDTO.from_orm(guest)


class SqlRsvpReadModel(RsvpReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_invitation(self, guest_id: str) -> InvitationDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            if guest is None:
                raise GuestNotFoundError(guest_id)
            occasion = await session.get(Occasion, guest.occasion_id)
            if occasion is None:
                raise GuestNotFoundError(guest_id)

            events: list[EventDTO] = []
            if guest.rsvps:
                result = await session.execute(
                    select(Event).where(
                        Event.occasion_id == guest.occasion_id,
                        Event.id.in_(list(guest.rsvps)),
                    )
                )
                events = sort_events([EventDTO.from_orm(e) for e in result.scalars().all()])

            return InvitationDTO(
                guest=GuestDTO.from_orm(guest),
                occasion_name=occasion.name,
                occasion_alias=occasion.alias,
                hosts=list(occasion.hosts or []),
                invite_image_url=occasion.invite_image_url,
                events=events,
            )
