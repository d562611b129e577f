from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.models.place import Place
from ...domain.opening_hours import DayHours, format_grouped
from ...domain.places import hours as hours_store
from ...domain.places.service import get_place, reload_place
from ..deps import get_session, require_admin
from .places import serialize_day
from .schemas import DayHoursBody, HoursGroupOut, HoursStatusOut, OpeningHoursOut, OpeningHoursReplace

router = APIRouter()


def _serialize_hours(place: Place) -> OpeningHoursOut:
    hours = hours_store.structured_hours(place)
    return OpeningHoursOut(
        place_id=place.id,
        hours=[serialize_day(day) for day in hours],
        grouped=[HoursGroupOut(day_text=g.day_text, hours=g.hours, days=g.days) for g in format_grouped(hours)],
        text=place.opening_hours_text,
        status=HoursStatusOut(**hours_store.hours_status(hours)),
    )


@router.get("/{place_id}/opening-hours", response_model=OpeningHoursOut)
async def get_opening_hours(place_id: int, session: AsyncSession = Depends(get_session)) -> OpeningHoursOut:
    return _serialize_hours(await get_place(session, place_id))


@router.put("/{place_id}/opening-hours", response_model=OpeningHoursOut, dependencies=[Depends(require_admin)])
async def replace_opening_hours(
    place_id: int, payload: OpeningHoursReplace, session: AsyncSession = Depends(get_session)
) -> OpeningHoursOut:
    place = await get_place(session, place_id)
    await hours_store.replace_hours(session, place, [DayHours(**day.model_dump()) for day in payload.hours])
    await session.commit()
    return _serialize_hours(await reload_place(session, place_id))


@router.put(
    "/{place_id}/opening-hours/{day_of_week}",
    response_model=OpeningHoursOut,
    dependencies=[Depends(require_admin)],
)
async def upsert_opening_hours_day(
    place_id: int, day_of_week: int, payload: DayHoursBody, session: AsyncSession = Depends(get_session)
) -> OpeningHoursOut:
    place = await get_place(session, place_id)
    await hours_store.upsert_day(session, place, DayHours(day_of_week=day_of_week, **payload.model_dump()))
    await session.commit()
    return _serialize_hours(await reload_place(session, place_id))


@router.delete(
    "/{place_id}/opening-hours",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_opening_hours(place_id: int, session: AsyncSession = Depends(get_session)) -> Response:
    place = await get_place(session, place_id)
    await hours_store.clear_hours(session, place)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
