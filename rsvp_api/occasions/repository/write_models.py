"""Occasion write operations. Return DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rsvp_api.config.database import async_session_manager
from rsvp_api.models import AliasIndex, Event, Guest, Occasion, SubGuest, Tag
from rsvp_api.occasions.dtos import (
    AliasTakenError,
    CascadeDeleteResultDTO,
    OccasionCreateDTO,
    OccasionDTO,
    OccasionNotFoundError,
    validate_alias,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "description", "hosts", "invite_image_url"})


async def _count(session: AsyncSession, model, criterion) -> int:
    result = await session.execute(select(func.count()).select_from(model).where(criterion))
    return result.scalar_one()


class OccasionWriteModel(ABC):
    @abstractmethod
    async def create_occasion(self, host_id: str, data: OccasionCreateDTO) -> OccasionDTO:
        """Create the occasion and claim its alias in one transaction.

        Raises:
            InvalidAliasError: alias is not a valid slug
            AliasTakenError: alias already claimed, nothing is written
        """
        raise NotImplementedError

    @abstractmethod
    async def update_occasion(
        self, host_id: str, occasion_id: str, changes: dict[str, Any]
    ) -> OccasionDTO:
        """Partial update. The alias never changes after creation."""
        raise NotImplementedError

    @abstractmethod
    async def delete_occasion_cascade(
        self, host_id: str, occasion_id: str
    ) -> CascadeDeleteResultDTO:
        """Delete the occasion with its events, guests, tags and alias, all or nothing."""
        raise NotImplementedError


class SqlOccasionWriteModel(OccasionWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def _get_owned(self, session: AsyncSession, host_id: str, occasion_id: str) -> Occasion:
        occasion = await session.get(Occasion, occasion_id)
        if occasion is None or occasion.created_by != host_id:
            raise OccasionNotFoundError(occasion_id)
        return occasion

    async def create_occasion(self, host_id: str, data: OccasionCreateDTO) -> OccasionDTO:
        alias = validate_alias(data.alias)

        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            if await session.get(AliasIndex, alias) is not None:
                raise AliasTakenError(alias)

            occasion = Occasion(
                name=data.name.strip(),
                alias=alias,
                description=data.description,
                hosts=list(data.hosts),
                invite_image_url=data.invite_image_url,
                created_by=host_id,
            )
            try:
                session.add(occasion)
                await session.flush()
                session.add(AliasIndex(alias=alias, occasion_id=occasion.id, created_by=host_id))
                await session.flush()
            except IntegrityError as e:
                # a concurrent creator claimed the alias after our check
                logger.warning(f"Alias '{alias}' claimed concurrently: {e.orig}")
                raise AliasTakenError(alias) from e

            await session.refresh(occasion)
            logger.info(f"Created occasion {occasion.id} with alias '{alias}' for host {host_id}")
            return OccasionDTO.from_orm(occasion)

    async def update_occasion(
        self, host_id: str, occasion_id: str, changes: dict[str, Any]
    ) -> OccasionDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            occasion = await self._get_owned(session, host_id, occasion_id)

            for key, value in changes.items():
                if key not in UPDATABLE_FIELDS:
                    continue
                if key == "hosts":
                    value = list(value or [])
                setattr(occasion, key, value)

            await session.flush()
            await session.refresh(occasion)
            return OccasionDTO.from_orm(occasion)

    async def delete_occasion_cascade(
        self, host_id: str, occasion_id: str
    ) -> CascadeDeleteResultDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            occasion = await self._get_owned(session, host_id, occasion_id)
            alias = occasion.alias

            guest_ids = select(Guest.id).where(Guest.occasion_id == occasion_id)
            result = CascadeDeleteResultDTO(
                occasion_id=occasion_id,
                events=await _count(session, Event, Event.occasion_id == occasion_id),
                guests=await _count(session, Guest, Guest.occasion_id == occasion_id),
                sub_guests=await _count(session, SubGuest, SubGuest.guest_id.in_(guest_ids)),
                tags=await _count(session, Tag, Tag.occasion_id == occasion_id),
            )

            # children first so foreign keys hold at every step
            await session.execute(delete(SubGuest).where(SubGuest.guest_id.in_(guest_ids)))
            await session.execute(delete(Guest).where(Guest.occasion_id == occasion_id))
            await session.execute(delete(Event).where(Event.occasion_id == occasion_id))
            await session.execute(delete(Tag).where(Tag.occasion_id == occasion_id))
            await session.execute(delete(AliasIndex).where(AliasIndex.alias == alias))
            await session.delete(occasion)
            await session.flush()

            logger.info(f"Deleted occasion {occasion_id} ('{alias}'): {result}")
            return result
