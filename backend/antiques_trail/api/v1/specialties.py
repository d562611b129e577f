from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.specialties import service as specialty_service
from ...domain.specialties.service import SpecialtyNode
from ..deps import get_session, require_admin
from .places import parse_id_list
from .schemas import SpecialtyCountOut, SpecialtyIn, SpecialtyOut, SpecialtyTreeOut, SpecialtyUpdate

router = APIRouter()


def _serialize_node(node: SpecialtyNode) -> SpecialtyTreeOut:
    return SpecialtyTreeOut(
        id=node.id,
        name=node.name,
        description=node.description,
        parent_id=node.parent_id,
        subcategories=[_serialize_node(child) for child in node.subcategories],
    )


@router.get("", response_model=None)
async def list_specialties(
    session: AsyncSession = Depends(get_session),
    main_only: bool = Query(default=False),
    parent_id: int | None = Query(default=None),
    ids: str | None = Query(default=None, description="Comma-separated specialty ids"),
    name: list[str] | None = Query(default=None),
    type_id: int | None = Query(default=None),
    place_id: int | None = Query(default=None),
    hierarchical: bool = Query(default=False),
) -> list[SpecialtyOut] | list[SpecialtyTreeOut]:
    if place_id is not None:
        specialties = await specialty_service.specialties_for_place(session, place_id, hierarchical=hierarchical)
    else:
        specialties = await specialty_service.list_specialties(
            session,
            main_only=main_only and not hierarchical,
            parent_id=parent_id,
            ids=parse_id_list(ids) if ids is not None else None,
            names=name,
            type_id=type_id,
        )
        if hierarchical:
            return [_serialize_node(node) for node in specialty_service.build_hierarchy(specialties)]
    return [SpecialtyOut.model_validate(specialty) for specialty in specialties]


@router.get("/counts", response_model=list[SpecialtyCountOut])
async def specialty_counts(session: AsyncSession = Depends(get_session)) -> list[SpecialtyCountOut]:
    return [SpecialtyCountOut(**row) for row in await specialty_service.specialty_counts(session)]


@router.get("/{specialty_id}", response_model=SpecialtyOut)
async def get_specialty(specialty_id: int, session: AsyncSession = Depends(get_session)) -> SpecialtyOut:
    return SpecialtyOut.model_validate(await specialty_service.get_specialty(session, specialty_id))


@router.post("", response_model=SpecialtyOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_specialty(payload: SpecialtyIn, session: AsyncSession = Depends(get_session)) -> SpecialtyOut:
    specialty = await specialty_service.create_specialty(
        session, payload.name, payload.description, payload.parent_id
    )
    return SpecialtyOut.model_validate(specialty)


@router.patch("/{specialty_id}", response_model=SpecialtyOut, dependencies=[Depends(require_admin)])
async def update_specialty(
    specialty_id: int, payload: SpecialtyUpdate, session: AsyncSession = Depends(get_session)
) -> SpecialtyOut:
    specialty = await specialty_service.update_specialty(session, specialty_id, payload.model_dump(exclude_unset=True))
    return SpecialtyOut.model_validate(specialty)


@router.delete("/{specialty_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_specialty(specialty_id: int, session: AsyncSession = Depends(get_session)) -> Response:
    await specialty_service.delete_specialty(session, specialty_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
