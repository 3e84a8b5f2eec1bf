import contextlib
import sys
from collections.abc import AsyncIterator

from pydantic.networks import PostgresDsn
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from rsvp_api.config.settings import settings


def create_engine(url: str | PostgresDsn):
    url = str(url)
    options = {}
    if "sqlite" in url:
        # one connection per session, so concurrent sessions never share a transaction
        options = {"connect_args": {"timeout": 15}, "poolclass": NullPool}
    return create_async_engine(url, echo=settings.LOG_DB, **options)


def testing_dsn(dsn: str | PostgresDsn) -> str:
    """Same server, database name prefixed with ``test_``."""
    base, db_name = str(dsn).rsplit("/", 1)
    return f"{base}/test_{db_name}"


if "pytest" in sys.modules:
    engine = create_engine(testing_dsn(settings.DB_DSN))
else:
    engine = create_engine(settings.DB_DSN)

async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def init_test_db():
    from rsvp_api.models import BaseModel

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
        await conn.run_sync(BaseModel.metadata.create_all)


async def drop_test_db():
    from rsvp_api.models import BaseModel

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
    await engine.dispose()


async def ping_database() -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


@contextlib.asynccontextmanager
async def async_session_manager(
    session_overwrite: AsyncSession | None = None,
) -> AsyncIterator[AsyncSession]:
    """One transaction: commit when the block finishes, roll back when it raises.

    A ``session_overwrite`` is handed back untouched and its owner decides when
    to commit.
    """
    if session_overwrite:
        yield session_overwrite
        return

    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()
