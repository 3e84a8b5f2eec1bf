"""Tests for SqlTagWriteModel."""

import pytest

from rsvp_api.guests.dtos import GuestCreateDTO
from rsvp_api.guests.repository.write_models import SqlGuestWriteModel
from rsvp_api.models.tag import DEFAULT_TAG_COLOR
from rsvp_api.tags.dtos import DuplicateTagNameError, TagInUseError, TagNotFoundError
from rsvp_api.tags.repository.read_models import SqlTagReadModel
from rsvp_api.tags.repository.write_models import SqlTagWriteModel

HOST = "host-under-test"


@pytest.mark.asyncio
async def test_create_and_list_tags(occasion):
    write_model = SqlTagWriteModel()
    family = await write_model.create_tag(HOST, occasion.id, " Family ")
    await write_model.create_tag(HOST, occasion.id, "Friends", color="#ff0000")

    tags = await SqlTagReadModel().list_tags(HOST, occasion.id)

    assert family.name == "Family"
    assert family.color == DEFAULT_TAG_COLOR
    assert {t.name: t.color for t in tags} == {"Family": DEFAULT_TAG_COLOR, "Friends": "#ff0000"}


@pytest.mark.asyncio
async def test_tag_names_are_unique_per_occasion(occasion):
    write_model = SqlTagWriteModel()
    await write_model.create_tag(HOST, occasion.id, "Family")
    work = await write_model.create_tag(HOST, occasion.id, "Work")

    with pytest.raises(DuplicateTagNameError):
        await write_model.create_tag(HOST, occasion.id, "family")
    with pytest.raises(DuplicateTagNameError):
        await write_model.update_tag(HOST, work.id, name="FAMILY")


@pytest.mark.asyncio
async def test_tag_in_use_cannot_be_deleted(occasion):
    write_model = SqlTagWriteModel()
    tag = await write_model.create_tag(HOST, occasion.id, "Family")
    guest = await SqlGuestWriteModel().create_guest(
        HOST, occasion.id, GuestCreateDTO(first_name="Jane", last_name="Doe", tags=[tag.id])
    )

    with pytest.raises(TagInUseError) as exc_info:
        await write_model.delete_tag(HOST, tag.id)
    assert exc_info.value.guest_count == 1

    await SqlGuestWriteModel().update_guest(HOST, guest.id, {"tags": []})
    await write_model.delete_tag(HOST, tag.id)
    assert await SqlTagReadModel().list_tags(HOST, occasion.id) == []


@pytest.mark.asyncio
async def test_update_unknown_tag():
    with pytest.raises(TagNotFoundError):
        await SqlTagWriteModel().update_tag(HOST, "missing", color="#000000")
