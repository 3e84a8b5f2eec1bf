import asyncio
import os
from contextlib import asynccontextmanager

# must be set before rsvp_api.config builds the engine
os.environ.setdefault("DB_DSN", "sqlite+aiosqlite:///./rsvp.db")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from rsvp_api.auth import get_current_host_id  # noqa: E402
from rsvp_api.config.database import drop_test_db, init_test_db  # noqa: E402
from rsvp_api.ids import random_token  # noqa: E402
from rsvp_api.main import app  # noqa: E402
from rsvp_api.occasions.dtos import OccasionCreateDTO  # noqa: E402
from rsvp_api.occasions.repository.write_models import SqlOccasionWriteModel  # noqa: E402

TEST_HOST_ID = "host-under-test"


@pytest.fixture(scope="session", autouse=True)
def test_database():
    asyncio.run(init_test_db())
    yield
    asyncio.run(drop_test_db())


@pytest.fixture
def host_id() -> str:
    return TEST_HOST_ID


@pytest.fixture
def client_factory():
    """Build a client with dependency overrides, signed in as the test host unless authenticated=False."""

    @asynccontextmanager
    async def factory(overrides: dict | None = None, authenticated: bool = True):
        app.dependency_overrides.clear()
        if authenticated:
            app.dependency_overrides[get_current_host_id] = lambda: TEST_HOST_ID
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac


def make_alias() -> str:
    return f"occasion-{random_token(10).lower()}"


@pytest.fixture
def alias() -> str:
    """A fresh alias. The test database lives for the whole session."""
    return make_alias()


@pytest.fixture
async def occasion(alias):
    return await SqlOccasionWriteModel().create_occasion(
        TEST_HOST_ID,
        OccasionCreateDTO(name="Jane & Joe", alias=alias, hosts=["Jane", "Joe"]),
    )
