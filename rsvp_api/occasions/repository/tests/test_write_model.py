"""Tests for SqlOccasionWriteModel."""

import pytest
from sqlalchemy import select

from rsvp_api.config.database import async_session_manager
from rsvp_api.events.dtos import EventCreateDTO
from rsvp_api.events.repository.write_models import SqlEventWriteModel
from rsvp_api.guests.dtos import GuestCreateDTO, SubGuestInputDTO
from rsvp_api.guests.repository.write_models import SqlGuestWriteModel
from rsvp_api.models import AliasIndex, Event, Guest, Occasion, SubGuest, Tag
from rsvp_api.occasions.dtos import (
    AliasTakenError,
    InvalidAliasError,
    OccasionCreateDTO,
    OccasionNotFoundError,
)
from rsvp_api.occasions.repository.read_models import SqlOccasionReadModel
from rsvp_api.occasions.repository.write_models import SqlOccasionWriteModel
from rsvp_api.tags.repository.write_models import SqlTagWriteModel

HOST = "host-under-test"


@pytest.mark.asyncio
async def test_create_occasion_claims_alias(alias):
    write_model = SqlOccasionWriteModel()

    occasion = await write_model.create_occasion(
        HOST, OccasionCreateDTO(name=" Summer Wedding ", alias=alias.upper(), hosts=["Jane"])
    )

    assert occasion.alias == alias
    assert occasion.name == "Summer Wedding"
    assert occasion.created_by == HOST
    assert len(occasion.id) == 20
    async with async_session_manager() as session:
        entry = await session.get(AliasIndex, alias)
    assert entry.occasion_id == occasion.id


@pytest.mark.asyncio
async def test_alias_is_claimed_once(occasion):
    write_model = SqlOccasionWriteModel()

    with pytest.raises(AliasTakenError):
        await write_model.create_occasion(
            "another-host", OccasionCreateDTO(name="Copycat", alias=occasion.alias)
        )

    async with async_session_manager() as session:
        result = await session.execute(select(Occasion).where(Occasion.alias == occasion.alias))
        assert len(result.scalars().all()) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_alias", ["ab", "has space", "double--hyphen", "-leading", "x" * 65])
async def test_invalid_alias_is_rejected(bad_alias):
    with pytest.raises(InvalidAliasError):
        await SqlOccasionWriteModel().create_occasion(
            HOST, OccasionCreateDTO(name="Bad", alias=bad_alias)
        )


@pytest.mark.asyncio
async def test_alias_availability(occasion, alias):
    read_model = SqlOccasionReadModel()

    for candidate, expected in [(occasion.alias, False), (f"{alias}-free", True), ("Not Valid", False)]:
        first = await read_model.is_alias_available(candidate)
        second = await read_model.is_alias_available(candidate)
        assert first is second is expected


@pytest.mark.asyncio
async def test_update_never_changes_alias(occasion):
    updated = await SqlOccasionWriteModel().update_occasion(
        HOST,
        occasion.id,
        {"name": "Renamed", "alias": "something-else", "description": "At the lake"},
    )

    assert updated.name == "Renamed"
    assert updated.description == "At the lake"
    assert updated.alias == occasion.alias


@pytest.mark.asyncio
async def test_update_by_another_host(occasion):
    with pytest.raises(OccasionNotFoundError):
        await SqlOccasionWriteModel().update_occasion("intruder", occasion.id, {"name": "Mine"})


@pytest.mark.asyncio
async def test_cascade_delete_removes_everything(occasion):
    events = SqlEventWriteModel()
    ceremony = await events.create_event(HOST, occasion.id, EventCreateDTO(name="Ceremony"))
    await events.create_event(HOST, occasion.id, EventCreateDTO(name="Dinner"))
    guests = SqlGuestWriteModel()
    await guests.create_guest(
        HOST,
        occasion.id,
        GuestCreateDTO(
            first_name="Jane",
            last_name="Doe",
            rsvps={ceremony.id: "awaiting-response"},
            sub_guests=[
                SubGuestInputDTO(
                    first_name="Kid", last_name="Doe", rsvps={ceremony.id: "awaiting-response"}
                )
            ],
        ),
    )
    await guests.create_guest(HOST, occasion.id, GuestCreateDTO(first_name="John", last_name="Roe"))
    await SqlTagWriteModel().create_tag(HOST, occasion.id, "Family")

    result = await SqlOccasionWriteModel().delete_occasion_cascade(HOST, occasion.id)

    assert (result.events, result.guests, result.sub_guests, result.tags) == (2, 2, 1, 1)
    async with async_session_manager() as session:
        assert await session.get(Occasion, occasion.id) is None
        assert await session.get(AliasIndex, occasion.alias) is None
        for model in (Event, Guest, Tag):
            rows = await session.execute(select(model).where(model.occasion_id == occasion.id))
            assert rows.scalars().all() == []
        orphans = await session.execute(
            select(SubGuest).where(SubGuest.guest_id.notin_(select(Guest.id)))
        )
        assert orphans.scalars().all() == []


@pytest.mark.asyncio
async def test_alias_is_free_again_after_delete(occasion):
    await SqlOccasionWriteModel().delete_occasion_cascade(HOST, occasion.id)

    assert await SqlOccasionReadModel().is_alias_available(occasion.alias) is True


@pytest.mark.asyncio
async def test_cascade_delete_of_unknown_occasion():
    with pytest.raises(OccasionNotFoundError):
        await SqlOccasionWriteModel().delete_occasion_cascade(HOST, "missing")
