from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from rsvp_api.auth import get_current_host_id
from rsvp_api.occasions import urls
from rsvp_api.occasions.dtos import (
    AliasTakenError,
    InvalidAliasError,
    OccasionCreateDTO,
    OccasionNotFoundError,
)
from rsvp_api.occasions.repository.read_models import OccasionReadModel, SqlOccasionReadModel
from rsvp_api.occasions.repository.write_models import OccasionWriteModel, SqlOccasionWriteModel

router = APIRouter()

NULLABLE_FIELDS = frozenset({"description", "invite_image_url"})


class OccasionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    alias: str
    hosts: list[str] = []
    description: str | None = None
    invite_image_url: str | None = None


class OccasionUpdate(BaseModel):
    """Editable fields. An ``alias`` sent here is ignored."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    hosts: list[str] | None = None
    description: str | None = None
    invite_image_url: str | None = None


class OccasionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    alias: str
    hosts: list[str]
    description: str | None = None
    invite_image_url: str | None = None
    created_by: str
    created_at: datetime | None = None


class AliasAvailabilityResponse(BaseModel):
    alias: str
    available: bool


class OccasionDeleteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    occasion_id: str
    events: int
    guests: int
    sub_guests: int
    tags: int


def get_occasion_read_model() -> OccasionReadModel:
    """Dependency to get occasion read model instance."""
    return SqlOccasionReadModel()


def get_occasion_write_model() -> OccasionWriteModel:
    """Dependency to get occasion write model instance."""
    return SqlOccasionWriteModel()


@router.get(urls.OCCASIONS_URL, response_model=list[OccasionResponse])
async def list_occasions(
    host_id: str = Depends(get_current_host_id),
    read_model: OccasionReadModel = Depends(get_occasion_read_model),
) -> list[OccasionResponse]:
    occasions = await read_model.list_occasions(host_id)
    return [OccasionResponse.model_validate(o) for o in occasions]


@router.post(urls.OCCASIONS_URL, response_model=OccasionResponse, status_code=status.HTTP_201_CREATED)
async def create_occasion(
    data: OccasionCreate,
    host_id: str = Depends(get_current_host_id),
    write_model: OccasionWriteModel = Depends(get_occasion_write_model),
) -> OccasionResponse:
    try:
        occasion = await write_model.create_occasion(
            host_id,
            OccasionCreateDTO(
                name=data.name,
                alias=data.alias,
                hosts=data.hosts,
                description=data.description,
                invite_image_url=data.invite_image_url,
            ),
        )
    except InvalidAliasError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AliasTakenError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return OccasionResponse.model_validate(occasion)


@router.get(urls.ALIAS_AVAILABILITY_URL, response_model=AliasAvailabilityResponse)
async def check_alias_availability(
    alias: str,
    host_id: str = Depends(get_current_host_id),
    read_model: OccasionReadModel = Depends(get_occasion_read_model),
) -> AliasAvailabilityResponse:
    available = await read_model.is_alias_available(alias)
    return AliasAvailabilityResponse(alias=alias, available=available)


@router.get(urls.OCCASION_BY_ALIAS_URL, response_model=OccasionResponse)
async def get_occasion_by_alias(
    alias: str,
    host_id: str = Depends(get_current_host_id),
    read_model: OccasionReadModel = Depends(get_occasion_read_model),
) -> OccasionResponse:
    try:
        occasion = await read_model.get_occasion_by_alias(host_id, alias)
    except OccasionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OccasionResponse.model_validate(occasion)


@router.get(urls.OCCASION_URL, response_model=OccasionResponse)
async def get_occasion(
    occasion_id: str,
    host_id: str = Depends(get_current_host_id),
    read_model: OccasionReadModel = Depends(get_occasion_read_model),
) -> OccasionResponse:
    try:
        occasion = await read_model.get_occasion(host_id, occasion_id)
    except OccasionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OccasionResponse.model_validate(occasion)


@router.patch(urls.OCCASION_URL, response_model=OccasionResponse)
async def update_occasion(
    occasion_id: str,
    data: OccasionUpdate,
    host_id: str = Depends(get_current_host_id),
    write_model: OccasionWriteModel = Depends(get_occasion_write_model),
) -> OccasionResponse:
    try:
        occasion = await write_model.update_occasion(
            host_id,
            occasion_id,
            {
                key: value
                for key, value in data.model_dump(exclude_unset=True).items()
                if value is not None or key in NULLABLE_FIELDS
            },
        )
    except OccasionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OccasionResponse.model_validate(occasion)


@router.delete(urls.OCCASION_URL, response_model=OccasionDeleteResponse)
async def delete_occasion(
    occasion_id: str,
    host_id: str = Depends(get_current_host_id),
    write_model: OccasionWriteModel = Depends(get_occasion_write_model),
) -> OccasionDeleteResponse:
    """Delete the occasion together with its events, guests, tags and alias."""
    try:
        result = await write_model.delete_occasion_cascade(host_id, occasion_id)
    except OccasionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OccasionDeleteResponse.model_validate(result)
