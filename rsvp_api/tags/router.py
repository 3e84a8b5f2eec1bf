from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field

from rsvp_api.auth import get_current_host_id
from rsvp_api.occasions.dtos import OccasionNotFoundError
from rsvp_api.tags import urls
from rsvp_api.tags.dtos import DuplicateTagNameError, TagInUseError, TagNotFoundError
from rsvp_api.tags.repository.read_models import SqlTagReadModel, TagReadModel
from rsvp_api.tags.repository.write_models import SqlTagWriteModel, TagWriteModel

router = APIRouter()

COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)


class TagUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)


class TagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    occasion_id: str
    name: str
    color: str


def get_tag_read_model() -> TagReadModel:
    return SqlTagReadModel()


def get_tag_write_model() -> TagWriteModel:
    return SqlTagWriteModel()


@router.get(urls.OCCASION_TAGS_URL, response_model=list[TagResponse])
async def list_tags(
    occasion_id: str,
    host_id: str = Depends(get_current_host_id),
    read_model: TagReadModel = Depends(get_tag_read_model),
) -> list[TagResponse]:
    return [TagResponse.model_validate(t) for t in await read_model.list_tags(host_id, occasion_id)]


@router.post(urls.OCCASION_TAGS_URL, response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    occasion_id: str,
    data: TagCreate,
    host_id: str = Depends(get_current_host_id),
    write_model: TagWriteModel = Depends(get_tag_write_model),
) -> TagResponse:
    try:
        tag = await write_model.create_tag(host_id, occasion_id, data.name, data.color)
    except OccasionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateTagNameError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return TagResponse.model_validate(tag)


@router.patch(urls.TAG_URL, response_model=TagResponse)
async def update_tag(
    tag_id: str,
    data: TagUpdate,
    host_id: str = Depends(get_current_host_id),
    write_model: TagWriteModel = Depends(get_tag_write_model),
) -> TagResponse:
    try:
        tag = await write_model.update_tag(host_id, tag_id, name=data.name, color=data.color)
    except TagNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateTagNameError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return TagResponse.model_validate(tag)


@router.delete(urls.TAG_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: str,
    host_id: str = Depends(get_current_host_id),
    write_model: TagWriteModel = Depends(get_tag_write_model),
) -> Response:
    try:
        await write_model.delete_tag(host_id, tag_id)
    except TagNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TagInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
