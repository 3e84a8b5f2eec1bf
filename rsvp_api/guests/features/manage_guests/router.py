from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import EmailStr, Field

from rsvp_api.auth import get_current_host_id
from rsvp_api.guests import urls
from rsvp_api.guests.dtos import (
    GuestCreateDTO,
    GuestIdStrategy,
    GuestNotFoundError,
    InvalidGuestError,
    RsvpStatus,
    SubGuestInputDTO,
)
from rsvp_api.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from rsvp_api.guests.repository.write_models import GuestWriteModel, SqlGuestWriteModel
from rsvp_api.guests.schemas import GuestResponse, RsvpMapMixin, SubGuestPayload
from rsvp_api.occasions.dtos import OccasionNotFoundError

router = APIRouter()

NULLABLE_FIELDS = frozenset({"email", "dietary_restrictions"})


class GuestCreate(RsvpMapMixin):
    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    email: EmailStr | None = None
    rsvps: dict[str, RsvpStatus] = {}
    sub_guests: list[SubGuestPayload] = []
    additional_guests: dict[str, int] = {}
    tags: list[str] = []
    dietary_restrictions: str | None = None
    id_strategy: GuestIdStrategy = GuestIdStrategy.NAME


class GuestUpdate(RsvpMapMixin):
    first_name: str | None = Field(default=None, min_length=1, max_length=255)
    last_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    rsvps: dict[str, RsvpStatus] | None = None
    sub_guests: list[SubGuestPayload] | None = None
    additional_guests: dict[str, int] | None = None
    additional_rsvps: dict[str, int] | None = None
    email_sent: bool | None = None
    tags: list[str] | None = None
    dietary_restrictions: str | None = None


def get_guest_read_model() -> GuestReadModel:
    """Dependency to get guest read model instance."""
    return SqlGuestReadModel()


def get_guest_write_model() -> GuestWriteModel:
    """Dependency to get guest write model instance."""
    return SqlGuestWriteModel()


def _sub_guest_inputs(payloads: list[SubGuestPayload]) -> list[SubGuestInputDTO]:
    return [SubGuestInputDTO(**payload.model_dump()) for payload in payloads]


@router.get(urls.OCCASION_GUESTS_URL, response_model=list[GuestResponse])
async def list_guests(
    occasion_id: str,
    host_id: str = Depends(get_current_host_id),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> list[GuestResponse]:
    guests = await read_model.list_guests(host_id, occasion_id)
    return [GuestResponse.model_validate(g) for g in guests]


@router.post(urls.OCCASION_GUESTS_URL, response_model=GuestResponse, status_code=status.HTTP_201_CREATED)
async def create_guest(
    occasion_id: str,
    data: GuestCreate,
    host_id: str = Depends(get_current_host_id),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    guest_data = GuestCreateDTO(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        rsvps=data.rsvps,
        sub_guests=_sub_guest_inputs(data.sub_guests),
        additional_guests=data.additional_guests,
        tags=data.tags,
        dietary_restrictions=data.dietary_restrictions,
    )
    try:
        guest = await write_model.create_guest(
            host_id, occasion_id, guest_data, id_strategy=data.id_strategy
        )
    except OccasionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidGuestError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return GuestResponse.model_validate(guest)


@router.get(urls.GUEST_URL, response_model=GuestResponse)
async def get_guest(
    guest_id: str,
    host_id: str = Depends(get_current_host_id),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> GuestResponse:
    try:
        guest = await read_model.get_guest(host_id, guest_id)
    except GuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return GuestResponse.model_validate(guest)


@router.patch(urls.GUEST_URL, response_model=GuestResponse)
async def update_guest(
    guest_id: str,
    data: GuestUpdate,
    host_id: str = Depends(get_current_host_id),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    changes = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    if "sub_guests" in changes:
        changes["sub_guests"] = _sub_guest_inputs(data.sub_guests)
    try:
        guest = await write_model.update_guest(host_id, guest_id, changes)
    except GuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidGuestError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return GuestResponse.model_validate(guest)


@router.delete(urls.GUEST_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_guest(
    guest_id: str,
    host_id: str = Depends(get_current_host_id),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> Response:
    try:
        await write_model.delete_guest(host_id, guest_id)
    except GuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
