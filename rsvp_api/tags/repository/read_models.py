import abc
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rsvp_api.config.database import async_session_manager
from rsvp_api.models import Tag
from rsvp_api.tags.dtos import TagDTO


class TagReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_tags(self, host_id: str, occasion_id: str) -> list[TagDTO]:
        raise NotImplementedError


class SqlTagReadModel(TagReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def list_tags(self, host_id: str, occasion_id: str) -> list[TagDTO]:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Tag)
                .where(Tag.occasion_id == occasion_id, Tag.created_by == host_id)
                .order_by(Tag.name)
            )
            return [TagDTO.from_orm(t) for t in result.scalars().all()]
