import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rsvp_api.config.database import ping_database

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "0.1.0"


class HealthCheckResponse(BaseModel):
    status: str
    version: str = API_VERSION
    database: str


def get_database_ping():
    return ping_database


@router.get("/", response_model=HealthCheckResponse)
async def health_check(ping=Depends(get_database_ping)) -> HealthCheckResponse:
    """Reports ``degraded`` instead of failing when the database cannot be reached."""
    try:
        await ping()
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return HealthCheckResponse(status="degraded", database="unavailable")
    return HealthCheckResponse(status="healthy", database="ok")
