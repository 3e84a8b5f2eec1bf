from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator

from rsvp_api.guests.dtos import (
    GuestNotFoundError,
    RsvpResponseDTO,
    RsvpStatus,
    RsvpSubmissionDTO,
    RsvpTransitionError,
    SubGuestNotFoundError,
)
from rsvp_api.guests.repository.write_models import RsvpWriteModel, SqlRsvpWriteModel
from rsvp_api.guests.schemas import GuestResponse
from rsvp_api.guests.urls import (
    CONFIRM_RSVP_URL,
    SET_ADDITIONAL_GUESTS_URL,
    SET_DIETARY_RESTRICTIONS_URL,
    SET_RSVP_STATUS_URL,
)

router = APIRouter()


class StatusPayload(BaseModel):
    status: RsvpStatus
    sub_guest_id: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        return RsvpStatus.normalize(value)


class AdditionalGuestsPayload(BaseModel):
    count: int = Field(ge=0)


class DietaryRestrictionsPayload(BaseModel):
    dietary_restrictions: str | None = None
    sub_guest_id: str | None = None


class ResponseItem(StatusPayload):
    event_id: str


class ConfirmPayload(BaseModel):
    responses: list[ResponseItem] = []
    additional_counts: dict[str, int] = {}
    dietary_restrictions: str | None = None
    sub_guest_dietary_restrictions: dict[str, str | None] = {}


def get_rsvp_write_model() -> RsvpWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRsvpWriteModel()


async def _run(write):
    try:
        guest = await write
    except (GuestNotFoundError, SubGuestNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RsvpTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return GuestResponse.model_validate(guest)


@router.put(SET_RSVP_STATUS_URL, response_model=GuestResponse)
async def set_rsvp_status(
    guest_id: str,
    event_id: str,
    payload: StatusPayload,
    write_model: RsvpWriteModel = Depends(get_rsvp_write_model),
) -> GuestResponse:
    """Answer for the guest, or for one of their companions when ``sub_guest_id`` is set."""
    return await _run(
        write_model.set_status(guest_id, event_id, payload.status, sub_guest_id=payload.sub_guest_id)
    )


@router.put(SET_ADDITIONAL_GUESTS_URL, response_model=GuestResponse)
async def set_additional_guests(
    guest_id: str,
    event_id: str,
    payload: AdditionalGuestsPayload,
    write_model: RsvpWriteModel = Depends(get_rsvp_write_model),
) -> GuestResponse:
    """Counts above the plus-one cap are clamped, not rejected."""
    return await _run(write_model.set_additional_count(guest_id, event_id, payload.count))


@router.put(SET_DIETARY_RESTRICTIONS_URL, response_model=GuestResponse)
async def set_dietary_restrictions(
    guest_id: str,
    payload: DietaryRestrictionsPayload,
    write_model: RsvpWriteModel = Depends(get_rsvp_write_model),
) -> GuestResponse:
    return await _run(
        write_model.set_dietary_restrictions(
            guest_id, payload.dietary_restrictions, sub_guest_id=payload.sub_guest_id
        )
    )


@router.post(CONFIRM_RSVP_URL, response_model=GuestResponse)
async def confirm_rsvp(
    guest_id: str,
    payload: ConfirmPayload,
    write_model: RsvpWriteModel = Depends(get_rsvp_write_model),
) -> GuestResponse:
    """Submit the whole RSVP form at once. Nothing is stored if any answer is rejected."""
    submission = RsvpSubmissionDTO(
        responses=[
            RsvpResponseDTO(
                event_id=item.event_id, status=item.status, sub_guest_id=item.sub_guest_id
            )
            for item in payload.responses
        ],
        additional_counts=payload.additional_counts,
        dietary_restrictions=payload.dietary_restrictions,
        sub_guest_dietary_restrictions=payload.sub_guest_dietary_restrictions,
    )
    return await _run(write_model.confirm(guest_id, submission))
