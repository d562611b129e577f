from __future__ import annotations

from typing import Any, Sequence

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.logging import get_logger
from ...db.models.place import Place, PlaceType
from ..specialties import service as specialty_service

logger = get_logger(__name__)


async def list_place_types(session: AsyncSession) -> list[PlaceType]:
    result = await session.execute(select(PlaceType).order_by(PlaceType.name))
    return list(result.scalars().all())


async def get_place_type(session: AsyncSession, type_id: int) -> PlaceType:
    place_type = await session.get(PlaceType, type_id)
    if place_type is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Place type not found")
    return place_type


async def find_place_type(session: AsyncSession, name: str) -> PlaceType | None:
    result = await session.execute(select(PlaceType).where(func.lower(PlaceType.name) == name.strip().lower()))
    return result.scalars().first()


async def _ensure_unique(session: AsyncSession, name: str, current_id: int | None = None) -> None:
    existing = await find_place_type(session, name)
    if existing is not None and existing.id != current_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f'A place type named "{name}" already exists')


async def create_place_type(
    session: AsyncSession,
    name: str,
    description: str | None = None,
    specialty_ids: Sequence[int] | None = None,
) -> PlaceType:
    name = name.strip()
    await _ensure_unique(session, name)
    specialties = await specialty_service.specialties_by_ids(session, specialty_ids) if specialty_ids else []
    place_type = PlaceType(name=name, description=description, specialties=specialties)
    session.add(place_type)
    await session.commit()
    await session.refresh(place_type)
    logger.info("place_type_created", extra={"type_id": place_type.id, "type_name": name})
    return place_type


async def get_or_create_place_type(session: AsyncSession, name: str) -> tuple[PlaceType, bool]:
    """Used by the importer; flushes but leaves the commit to the caller."""

    existing = await find_place_type(session, name)
    if existing is not None:
        return existing, False
    place_type = PlaceType(name=name.strip(), specialties=[])
    session.add(place_type)
    await session.flush()
    logger.info("place_type_created", extra={"type_id": place_type.id, "type_name": place_type.name})
    return place_type, True


async def update_place_type(session: AsyncSession, type_id: int, changes: dict[str, Any]) -> PlaceType:
    place_type = await get_place_type(session, type_id)
    if changes.get("name") is not None:
        name = changes["name"].strip()
        await _ensure_unique(session, name, place_type.id)
        place_type.name = name
    if "description" in changes:
        place_type.description = changes["description"]
    if changes.get("specialty_ids") is not None:
        place_type.specialties = await specialty_service.specialties_by_ids(session, changes["specialty_ids"])
    await session.commit()
    await session.refresh(place_type)
    return place_type


async def delete_place_type(session: AsyncSession, type_id: int) -> None:
    place_type = await get_place_type(session, type_id)
    in_use = await session.scalar(select(func.count(Place.id)).where(Place.type_id == type_id))
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Place type is used by {in_use} place(s) and cannot be deleted",
        )
    await session.delete(place_type)
    await session.commit()
    logger.info("place_type_deleted", extra={"type_id": type_id})
