from dataclasses import replace

import pytest

from rsvp_api.occasions import urls
from rsvp_api.occasions.dtos import (
    AliasTakenError,
    CascadeDeleteResultDTO,
    OccasionDTO,
    OccasionNotFoundError,
    validate_alias,
)
from rsvp_api.occasions.repository.read_models import OccasionReadModel
from rsvp_api.occasions.repository.write_models import OccasionWriteModel
from rsvp_api.occasions.router import get_occasion_read_model, get_occasion_write_model

HOST = "host-under-test"


class InMemoryOccasionModel(OccasionReadModel, OccasionWriteModel):
    """Occasions kept in a dict, keyed by id."""

    def __init__(self):
        self.occasions: dict[str, OccasionDTO] = {}

    def _owned(self, host_id, occasion_id):
        occasion = self.occasions.get(occasion_id)
        if occasion is None or occasion.created_by != host_id:
            raise OccasionNotFoundError(occasion_id)
        return occasion

    async def list_occasions(self, host_id):
        return [o for o in self.occasions.values() if o.created_by == host_id]

    async def get_occasion(self, host_id, occasion_id):
        return self._owned(host_id, occasion_id)

    async def get_occasion_by_alias(self, host_id, alias):
        for occasion in self.occasions.values():
            if occasion.alias == alias and occasion.created_by == host_id:
                return occasion
        raise OccasionNotFoundError(alias)

    async def is_alias_available(self, alias):
        return all(o.alias != alias for o in self.occasions.values())

    async def create_occasion(self, host_id, data):
        alias = validate_alias(data.alias)
        if not await self.is_alias_available(alias):
            raise AliasTakenError(alias)
        occasion = OccasionDTO(
            id=f"occ{len(self.occasions) + 1}",
            name=data.name,
            alias=alias,
            created_by=host_id,
            hosts=list(data.hosts),
            description=data.description,
        )
        self.occasions[occasion.id] = occasion
        return occasion

    async def update_occasion(self, host_id, occasion_id, changes):
        occasion = self._owned(host_id, occasion_id)
        allowed = {k: v for k, v in changes.items() if k in {"name", "description", "hosts"}}
        self.occasions[occasion_id] = replace(occasion, **allowed)
        return self.occasions[occasion_id]

    async def delete_occasion_cascade(self, host_id, occasion_id):
        self._owned(host_id, occasion_id)
        del self.occasions[occasion_id]
        return CascadeDeleteResultDTO(occasion_id=occasion_id, events=2, guests=3, sub_guests=1, tags=0)


@pytest.fixture
def overrides():
    model = InMemoryOccasionModel()
    return {
        get_occasion_read_model: lambda: model,
        get_occasion_write_model: lambda: model,
    }


@pytest.mark.asyncio
async def test_create_and_fetch_occasion(client_factory, overrides):
    payload = {"name": "Jane & Joe", "alias": "jane-and-joe", "hosts": ["Jane", "Joe"]}

    async with client_factory(overrides) as client:
        created = await client.post(urls.OCCASIONS_URL, json=payload)
        by_alias = await client.get(urls.OCCASION_BY_ALIAS_URL.format(alias="jane-and-joe"))
        listed = await client.get(urls.OCCASIONS_URL)

    assert created.status_code == 201
    assert created.json()["created_by"] == HOST
    assert by_alias.status_code == 200
    assert by_alias.json()["id"] == created.json()["id"]
    assert [o["alias"] for o in listed.json()] == ["jane-and-joe"]


@pytest.mark.asyncio
async def test_alias_conflicts(client_factory, overrides):
    payload = {"name": "Jane & Joe", "alias": "jane-and-joe"}

    async with client_factory(overrides) as client:
        await client.post(urls.OCCASIONS_URL, json=payload)
        taken = await client.post(urls.OCCASIONS_URL, json=payload)
        invalid = await client.post(urls.OCCASIONS_URL, json={**payload, "alias": "Not OK!"})
        availability = await client.get(urls.ALIAS_AVAILABILITY_URL.format(alias="jane-and-joe"))

    assert taken.status_code == 409
    assert invalid.status_code == 422
    assert availability.json() == {"alias": "jane-and-joe", "available": False}


@pytest.mark.asyncio
async def test_update_ignores_alias(client_factory, overrides):
    async with client_factory(overrides) as client:
        created = (
            await client.post(urls.OCCASIONS_URL, json={"name": "Party", "alias": "big-party"})
        ).json()
        response = await client.patch(
            urls.OCCASION_URL.format(occasion_id=created["id"]),
            json={"name": "Bigger Party", "alias": "other-alias"},
        )

    assert response.status_code == 200
    assert response.json()["name"] == "Bigger Party"
    assert response.json()["alias"] == "big-party"


@pytest.mark.asyncio
async def test_delete_returns_counts(client_factory, overrides):
    async with client_factory(overrides) as client:
        created = (
            await client.post(urls.OCCASIONS_URL, json={"name": "Party", "alias": "big-party"})
        ).json()
        response = await client.delete(urls.OCCASION_URL.format(occasion_id=created["id"]))
        missing = await client.get(urls.OCCASION_URL.format(occasion_id=created["id"]))

    assert response.status_code == 200
    assert response.json() == {
        "occasion_id": created["id"],
        "events": 2,
        "guests": 3,
        "sub_guests": 1,
        "tags": 0,
    }
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_host_endpoints_require_token(client_factory, overrides):
    async with client_factory(overrides, authenticated=False) as client:
        response = await client.get(urls.OCCASIONS_URL)

    assert response.status_code == 401
