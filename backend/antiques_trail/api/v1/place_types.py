from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.models.place import PlaceType
from ...domain.place_types import service as type_service
from ..deps import get_session, require_admin
from .schemas import PlaceTypeIn, PlaceTypeOut, PlaceTypeUpdate

router = APIRouter()


def _serialize_type(place_type: PlaceType) -> PlaceTypeOut:
    return PlaceTypeOut(
        id=place_type.id,
        name=place_type.name,
        description=place_type.description,
        specialty_ids=[specialty.id for specialty in place_type.specialties],
    )


@router.get("", response_model=list[PlaceTypeOut])
async def list_place_types(session: AsyncSession = Depends(get_session)) -> list[PlaceTypeOut]:
    return [_serialize_type(item) for item in await type_service.list_place_types(session)]


@router.get("/{type_id}", response_model=PlaceTypeOut)
async def get_place_type(type_id: int, session: AsyncSession = Depends(get_session)) -> PlaceTypeOut:
    return _serialize_type(await type_service.get_place_type(session, type_id))


@router.post("", response_model=PlaceTypeOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_place_type(payload: PlaceTypeIn, session: AsyncSession = Depends(get_session)) -> PlaceTypeOut:
    place_type = await type_service.create_place_type(
        session, payload.name, payload.description, specialty_ids=payload.specialty_ids
    )
    return _serialize_type(place_type)


@router.patch("/{type_id}", response_model=PlaceTypeOut, dependencies=[Depends(require_admin)])
async def update_place_type(
    type_id: int, payload: PlaceTypeUpdate, session: AsyncSession = Depends(get_session)
) -> PlaceTypeOut:
    place_type = await type_service.update_place_type(session, type_id, payload.model_dump(exclude_unset=True))
    return _serialize_type(place_type)


@router.delete("/{type_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_place_type(type_id: int, session: AsyncSession = Depends(get_session)) -> Response:
    await type_service.delete_place_type(session, type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
