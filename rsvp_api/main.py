import asyncio
import logging
from contextlib import asynccontextmanager

import sentry_sdk
from alembic import command
from alembic.config import Config
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from rsvp_api.config.logging import setup_logging
from rsvp_api.config.settings import settings
from rsvp_api.events.router import router as events_router
from rsvp_api.guests.routers import router as guests_router
from rsvp_api.healthz.router import router as healthz_router
from rsvp_api.occasions.router import router as occasions_router
from rsvp_api.relay.router import router as relay_router
from rsvp_api.stats.router import router as stats_router
from rsvp_api.tags.router import router as tags_router
from rsvp_api.webhooks.router import router as webhooks_router

setup_logging()
logger = logging.getLogger(__name__)


async def run_migrations():
    alembic_cfg = Config("alembic.ini")
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        logger.info("Running database migrations")
        await run_migrations()
    yield


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="Occasion RSVP API",
    description="API for managing occasions, events, guest lists and per-event RSVPs",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(occasions_router, tags=["Occasions"])
app.include_router(events_router, tags=["Events"])
app.include_router(guests_router, tags=["Guests"])
app.include_router(tags_router, tags=["Tags"])
app.include_router(stats_router, tags=["Stats"])
app.include_router(relay_router, tags=["Email relay"])
app.include_router(webhooks_router, tags=["Webhooks"])


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the Occasion RSVP API"}
