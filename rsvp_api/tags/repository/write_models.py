import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rsvp_api.config.database import async_session_manager
from rsvp_api.models import Guest, Occasion, Tag
from rsvp_api.models.tag import DEFAULT_TAG_COLOR
from rsvp_api.occasions.dtos import OccasionNotFoundError
from rsvp_api.tags.dtos import DuplicateTagNameError, TagDTO, TagInUseError, TagNotFoundError

logger = logging.getLogger(__name__)


class TagWriteModel(ABC):
    @abstractmethod
    async def create_tag(
        self, host_id: str, occasion_id: str, name: str, color: str | None = None
    ) -> TagDTO:
        raise NotImplementedError

    @abstractmethod
    async def update_tag(
        self, host_id: str, tag_id: str, name: str | None = None, color: str | None = None
    ) -> TagDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_tag(self, host_id: str, tag_id: str) -> None:
        """Refuses with TagInUseError while any guest carries the tag."""
        raise NotImplementedError


class SqlTagWriteModel(TagWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def _get_owned(self, session: AsyncSession, host_id: str, tag_id: str) -> Tag:
        tag = await session.get(Tag, tag_id)
        if tag is None or tag.created_by != host_id:
            raise TagNotFoundError(tag_id)
        return tag

    async def _ensure_unique_name(
        self, session: AsyncSession, occasion_id: str, name: str, exclude_id: str | None = None
    ) -> None:
        result = await session.execute(
            select(Tag.id, Tag.name).where(Tag.occasion_id == occasion_id)
        )
        for other_id, other_name in result.all():
            if other_id != exclude_id and other_name.casefold() == name.casefold():
                raise DuplicateTagNameError(name)

    async def _flush(self, session: AsyncSession, name: str) -> None:
        try:
            await session.flush()
        except IntegrityError as e:
            raise DuplicateTagNameError(name) from e

    async def create_tag(
        self, host_id: str, occasion_id: str, name: str, color: str | None = None
    ) -> TagDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            occasion = await session.get(Occasion, occasion_id)
            if occasion is None or occasion.created_by != host_id:
                raise OccasionNotFoundError(occasion_id)

            name = name.strip()
            await self._ensure_unique_name(session, occasion_id, name)
            tag = Tag(
                occasion_id=occasion_id,
                name=name,
                color=color or DEFAULT_TAG_COLOR,
                created_by=host_id,
            )
            session.add(tag)
            await self._flush(session, name)
            return TagDTO.from_orm(tag)

    async def update_tag(
        self, host_id: str, tag_id: str, name: str | None = None, color: str | None = None
    ) -> TagDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            tag = await self._get_owned(session, host_id, tag_id)
            if name is not None:
                name = name.strip()
                await self._ensure_unique_name(session, tag.occasion_id, name, exclude_id=tag.id)
                tag.name = name
            if color is not None:
                tag.color = color
            await self._flush(session, tag.name)
            return TagDTO.from_orm(tag)

    async def delete_tag(self, host_id: str, tag_id: str) -> None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            tag = await self._get_owned(session, host_id, tag_id)

            # tags live in a JSON list on the guest, so filter in Python
            result = await session.execute(
                select(Guest.tags).where(Guest.occasion_id == tag.occasion_id)
            )
            in_use = sum(1 for tags in result.scalars().all() if tag_id in (tags or []))
            if in_use:
                raise TagInUseError(tag_id, in_use)

            await session.delete(tag)
            await session.flush()
            logger.info(f"Deleted tag {tag_id} from occasion {tag.occasion_id}")
