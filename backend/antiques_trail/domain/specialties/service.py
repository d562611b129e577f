from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Sequence

from fastapi import HTTPException, status
from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.logging import get_logger
from ...db.models.analytics import RequestStatus, SpecialtyRequest, SpecialtySearch
from ...db.models.place import Place
from ...db.models.specialty import PlaceSpecialty, PlaceTypeSpecialty, Specialty

logger = get_logger(__name__)


@dataclass
class SpecialtyNode:
    id: int
    name: str
    description: str | None
    parent_id: int | None
    subcategories: list["SpecialtyNode"] = field(default_factory=list)


def build_hierarchy(specialties: Iterable[Specialty]) -> list[SpecialtyNode]:
    """Nest a flat list under its main categories; orphans whose parent is absent are dropped."""

    nodes = {
        item.id: SpecialtyNode(id=item.id, name=item.name, description=item.description, parent_id=item.parent_id)
        for item in specialties
    }
    roots: list[SpecialtyNode] = []
    for node in nodes.values():
        if node.parent_id is None:
            roots.append(node)
        elif node.parent_id in nodes:
            nodes[node.parent_id].subcategories.append(node)
    roots.sort(key=lambda n: n.name.lower())
    for node in nodes.values():
        node.subcategories.sort(key=lambda n: n.name.lower())
    return roots


def split_text(text: str | None) -> list[str]:
    """``"Silver, Clocks ,, Books"`` → ``["Silver", "Clocks", "Books"]`` without case-insensitive repeats."""

    if not text:
        return []
    names: list[str] = []
    seen: set[str] = set()
    for part in text.split(","):
        name = part.strip()
        if name and name.lower() not in seen:
            seen.add(name.lower())
            names.append(name)
    return names


async def get_specialty(session: AsyncSession, specialty_id: int) -> Specialty:
    specialty = await session.get(Specialty, specialty_id)
    if specialty is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Specialty not found")
    return specialty


async def list_specialties(
    session: AsyncSession,
    *,
    main_only: bool = False,
    parent_id: int | None = None,
    ids: Sequence[int] | None = None,
    names: Sequence[str] | None = None,
    type_id: int | None = None,
) -> list[Specialty]:
    stmt = select(Specialty).order_by(Specialty.name)
    if type_id is not None:
        stmt = stmt.join(PlaceTypeSpecialty, PlaceTypeSpecialty.specialty_id == Specialty.id).where(
            PlaceTypeSpecialty.type_id == type_id
        )
    if main_only:
        stmt = stmt.where(Specialty.parent_id.is_(None))
    if parent_id is not None:
        stmt = stmt.where(Specialty.parent_id == parent_id)
    if ids is not None:
        if not ids:
            return []
        stmt = stmt.where(Specialty.id.in_(ids))
    if names:
        stmt = stmt.where(func.lower(Specialty.name).in_([name.lower() for name in names]))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def specialties_for_place(session: AsyncSession, place_id: int, *, hierarchical: bool = False) -> list[Specialty]:
    """Linked specialties; ``hierarchical`` also pulls in the parents of linked subcategories."""

    linked = select(PlaceSpecialty.specialty_id).where(PlaceSpecialty.place_id == place_id)
    stmt = select(Specialty).where(Specialty.id.in_(linked))
    if hierarchical:
        parents = select(Specialty.parent_id).where(Specialty.id.in_(linked), Specialty.parent_id.is_not(None))
        stmt = select(Specialty).where(Specialty.id.in_(linked) | Specialty.id.in_(parents))
    result = await session.execute(stmt.order_by(Specialty.name))
    return list(result.scalars().all())


async def create_specialty(
    session: AsyncSession, name: str, description: str | None = None, parent_id: int | None = None
) -> Specialty:
    name = name.strip()
    existing = await find_by_name(session, name)
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f'A specialty named "{name}" already exists')
    if parent_id is not None:
        await _ensure_valid_parent(session, parent_id)
    specialty = Specialty(name=name, description=description, parent_id=parent_id)
    session.add(specialty)
    await session.commit()
    await session.refresh(specialty)
    logger.info("specialty_created", extra={"specialty_id": specialty.id, "specialty_name": name})
    return specialty


async def update_specialty(session: AsyncSession, specialty_id: int, changes: dict) -> Specialty:
    specialty = await get_specialty(session, specialty_id)
    renamed = False
    if "name" in changes and changes["name"] is not None:
        name = changes["name"].strip()
        existing = await find_by_name(session, name)
        if existing is not None and existing.id != specialty.id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f'A specialty named "{name}" already exists')
        renamed = name != specialty.name
        specialty.name = name
    if "description" in changes:
        specialty.description = changes["description"]
    if "parent_id" in changes:
        parent_id = changes["parent_id"]
        if parent_id is not None:
            if parent_id == specialty.id:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A specialty cannot be its own parent")
            await _ensure_valid_parent(session, parent_id)
        specialty.parent_id = parent_id
    await session.commit()
    await session.refresh(specialty)
    if renamed:
        await _refresh_place_texts(session, await _linked_place_ids(session, specialty_id))
    return specialty


async def delete_specialty(session: AsyncSession, specialty_id: int) -> None:
    specialty = await get_specialty(session, specialty_id)
    place_ids = await _linked_place_ids(session, specialty_id)
    await session.delete(specialty)
    await session.commit()
    await _refresh_place_texts(session, place_ids)
    logger.info("specialty_deleted", extra={"specialty_id": specialty_id})


async def _linked_place_ids(session: AsyncSession, specialty_id: int) -> list[int]:
    result = await session.execute(select(PlaceSpecialty.place_id).where(PlaceSpecialty.specialty_id == specialty_id))
    return list(result.scalars().all())


async def _refresh_place_texts(session: AsyncSession, place_ids: Sequence[int]) -> None:
    """Rewrite the derived specialties text of places after a specialty rename or delete."""

    if not place_ids:
        return
    result = await session.execute(
        select(Place).where(Place.id.in_(place_ids)).execution_options(populate_existing=True)
    )
    for place in result.scalars():
        place.specialties_text = specialties_text(place.specialties) or None
    await session.commit()
    logger.info("place_specialties_text_refreshed", extra={"place_ids": list(place_ids)})


async def _ensure_valid_parent(session: AsyncSession, parent_id: int) -> None:
    parent = await session.get(Specialty, parent_id)
    if parent is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown parent specialty {parent_id}")
    if parent.parent_id is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Subcategories cannot have subcategories")


async def find_by_name(session: AsyncSession, name: str) -> Specialty | None:
    result = await session.execute(select(Specialty).where(func.lower(Specialty.name) == name.strip().lower()))
    return result.scalars().first()


def specialties_text(specialties: Iterable[Specialty]) -> str:
    return ", ".join(specialty.name for specialty in sorted(specialties, key=lambda s: s.name.lower()))


async def specialties_by_ids(session: AsyncSession, specialty_ids: Sequence[int]) -> list[Specialty]:
    """Load the given specialties; 400 if any id is unknown."""

    wanted = list(dict.fromkeys(specialty_ids))
    specialties = await list_specialties(session, ids=wanted)
    missing = set(wanted) - {specialty.id for specialty in specialties}
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown specialty ids: {', '.join(str(i) for i in sorted(missing))}",
        )
    return specialties


async def set_place_specialties(session: AsyncSession, place: Place, specialty_ids: Sequence[int]) -> None:
    """Replace the place's links by id and regenerate its specialties text. Caller commits."""

    specialties = await specialties_by_ids(session, specialty_ids)
    place.specialties = specialties
    place.specialties_text = specialties_text(specialties)


async def sync_specialties_from_text(session: AsyncSession, place: Place, text: str | None) -> list[Specialty]:
    """Find or create each comma-separated name and link them to the place. Caller commits."""

    names = split_text(text)
    specialties: list[Specialty] = []
    for name in names:
        specialty = await find_by_name(session, name)
        if specialty is None:
            specialty = Specialty(name=name)
            session.add(specialty)
            await session.flush()
            logger.info("specialty_created_from_text", extra={"specialty_id": specialty.id, "specialty_name": name})
        specialties.append(specialty)
    place.specialties = specialties
    place.specialties_text = ", ".join(names) or None
    return specialties


async def specialty_counts(session: AsyncSession) -> list[dict]:
    stmt = (
        select(
            Specialty.id,
            Specialty.name,
            Specialty.parent_id,
            func.count(distinct(PlaceSpecialty.place_id)).label("place_count"),
        )
        .outerjoin(PlaceSpecialty, PlaceSpecialty.specialty_id == Specialty.id)
        .group_by(Specialty.id)
        .order_by(Specialty.name)
    )
    result = await session.execute(stmt)
    return [dict(row._mapping) for row in result.all()]


async def submit_request(session: AsyncSession, place_id: int, request_text: str) -> SpecialtyRequest:
    if await session.get(Place, place_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Place not found")
    request = SpecialtyRequest(place_id=place_id, request_text=request_text.strip())
    session.add(request)
    await session.commit()
    await session.refresh(request)
    logger.info("specialty_request_submitted", extra={"place_id": place_id, "request_id": request.id})
    return request


async def list_requests(
    session: AsyncSession, *, place_id: int | None = None, status_filter: str = "pending"
) -> list[SpecialtyRequest]:
    stmt = select(SpecialtyRequest).order_by(SpecialtyRequest.created_at.desc(), SpecialtyRequest.id.desc())
    if place_id is not None:
        stmt = stmt.where(SpecialtyRequest.place_id == place_id)
    if status_filter != "all":
        try:
            wanted = RequestStatus(status_filter)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown status {status_filter}")
        stmt = stmt.where(SpecialtyRequest.status == wanted)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def review_request(session: AsyncSession, request_id: int, new_status: RequestStatus) -> SpecialtyRequest:
    request = await session.get(SpecialtyRequest, request_id)
    if request is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Specialty request not found")
    request.status = new_status
    await session.commit()
    await session.refresh(request)
    return request


async def log_search(
    session: AsyncSession, specialty_id: int, user_ip: str | None, session_id: str | None
) -> SpecialtySearch:
    await get_specialty(session, specialty_id)
    search = SpecialtySearch(specialty_id=specialty_id, user_ip=user_ip, session_id=session_id)
    session.add(search)
    await session.commit()
    return search


async def search_analytics(session: AsyncSession, *, days: int = 7, limit: int = 20) -> dict:
    since = datetime.now(timezone.utc) - timedelta(days=days)
    top_stmt = (
        select(
            Specialty.id,
            Specialty.name,
            Specialty.parent_id,
            func.count(SpecialtySearch.id).label("search_count"),
        )
        .join(Specialty, Specialty.id == SpecialtySearch.specialty_id)
        .where(SpecialtySearch.created_at >= since)
        .group_by(Specialty.id)
        .order_by(func.count(SpecialtySearch.id).desc(), Specialty.name)
        .limit(limit)
    )
    top = [dict(row._mapping) for row in (await session.execute(top_stmt)).all()]
    total = await session.scalar(select(func.count(SpecialtySearch.id)).where(SpecialtySearch.created_at >= since))
    return {"top_searches": top, "total_searches": total or 0, "days": days}


def split_place_specialties(specialties: Iterable[Specialty]) -> dict[str, list[Specialty]]:
    ordered = sorted(specialties, key=lambda s: s.name.lower())
    return {
        "main_categories": [s for s in ordered if s.parent_id is None],
        "subcategories": [s for s in ordered if s.parent_id is not None],
    }
