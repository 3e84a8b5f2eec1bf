import abc
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rsvp_api.config.database import async_session_manager
from rsvp_api.models import AliasIndex, Occasion
from rsvp_api.occasions.dtos import (
    InvalidAliasError,
    OccasionDTO,
    OccasionNotFoundError,
    validate_alias,
)


class OccasionReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_occasions(self, host_id: str) -> list[OccasionDTO]:
        """Occasions owned by the host, newest first."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_occasion(self, host_id: str, occasion_id: str) -> OccasionDTO:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_occasion_by_alias(self, host_id: str, alias: str) -> OccasionDTO:
        raise NotImplementedError

    @abc.abstractmethod
    async def is_alias_available(self, alias: str) -> bool:
        """Read-only check against the alias index. Malformed aliases are never available."""
        raise NotImplementedError


class SqlOccasionReadModel(OccasionReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def list_occasions(self, host_id: str) -> list[OccasionDTO]:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Occasion)
                .where(Occasion.created_by == host_id)
                .order_by(Occasion.created_at.desc(), Occasion.name)
            )
            return [OccasionDTO.from_orm(o) for o in result.scalars().all()]

    async def get_occasion(self, host_id: str, occasion_id: str) -> OccasionDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            occasion = await session.get(Occasion, occasion_id)
            if occasion is None or occasion.created_by != host_id:
                raise OccasionNotFoundError(occasion_id)
            return OccasionDTO.from_orm(occasion)

    async def get_occasion_by_alias(self, host_id: str, alias: str) -> OccasionDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Occasion).where(
                    Occasion.alias == alias.strip().lower(),
                    Occasion.created_by == host_id,
                )
            )
            occasion = result.scalar_one_or_none()
            if occasion is None:
                raise OccasionNotFoundError(alias)
            return OccasionDTO.from_orm(occasion)

    async def is_alias_available(self, alias: str) -> bool:
        try:
            alias = validate_alias(alias)
        except InvalidAliasError:
            return False
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            return await session.get(AliasIndex, alias) is None
