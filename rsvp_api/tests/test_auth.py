import pytest

from rsvp_api.auth import create_access_token, verify_access_token
from rsvp_api.occasions import urls
from rsvp_api.occasions.router import get_occasion_read_model
from rsvp_api.occasions.repository.read_models import OccasionReadModel


class EmptyOccasionReadModel(OccasionReadModel):
    def __init__(self):
        self.hosts = []

    async def list_occasions(self, host_id):
        self.hosts.append(host_id)
        return []

    async def get_occasion(self, host_id, occasion_id):
        raise NotImplementedError

    async def get_occasion_by_alias(self, host_id, alias):
        raise NotImplementedError

    async def is_alias_available(self, alias):
        return True


def test_token_round_trip():
    payload = verify_access_token(create_access_token("host-42"))

    assert payload["sub"] == "host-42"


def test_expired_or_tampered_tokens_are_rejected():
    assert verify_access_token(create_access_token("host-42", expires_minutes=-1)) is None
    assert verify_access_token(create_access_token("host-42") + "x") is None


@pytest.mark.asyncio
async def test_bearer_token_identifies_host(client_factory):
    read_model = EmptyOccasionReadModel()
    overrides = {get_occasion_read_model: lambda: read_model}

    async with client_factory(overrides, authenticated=False) as client:
        ok = await client.get(
            urls.OCCASIONS_URL,
            headers={"Authorization": f"Bearer {create_access_token('host-42')}"},
        )
        bad = await client.get(urls.OCCASIONS_URL, headers={"Authorization": "Bearer nope"})

    assert ok.status_code == 200
    assert read_model.hosts == ["host-42"]
    assert bad.status_code == 401
