from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.models.place import Place
from ...domain.opening_hours import DayHours
from ...domain.places import service as place_service
from ...domain.specialties import service as specialty_service
from ..deps import get_session, require_admin
from .schemas import (
    DashboardStatsOut,
    DayHoursOut,
    OnlineSalesLinkOut,
    PlaceCreate,
    PlaceOut,
    PlaceSpecialtiesOut,
    PlaceSpecialtiesUpdate,
    PlaceUpdate,
    SpecialtyOut,
)

router = APIRouter()

# API field name → service field name for the derived text columns.
_TEXT_ALIASES = {"specialties": "specialties_text", "opening_hours": "opening_hours_text"}


def serialize_day(day: DayHours) -> DayHoursOut:
    return DayHoursOut(
        day_of_week=day.day_of_week,
        day_name=day.day_name,
        open_time=day.open_time,
        close_time=day.close_time,
        is_closed=day.is_closed,
        is_by_appointment=day.is_by_appointment,
        notes=day.notes,
    )


def _serialize_place(place: Place) -> PlaceOut:
    hours = sorted((DayHours.from_row(row) for row in place.opening_hours), key=lambda day: day.day_of_week)
    return PlaceOut(
        id=place.id,
        name=place.name,
        address=place.address,
        address_street=place.address_street,
        address_area=place.address_area,
        address_city=place.address_city,
        address_postcode=place.address_postcode,
        phone=place.phone,
        second_phone=place.second_phone,
        email=place.email,
        website=place.website,
        description=place.description,
        specialties=place.specialties_text,
        opening_hours=place.opening_hours_text,
        lat=place.lat,
        lng=place.lng,
        type_id=place.type_id,
        type_name=place.type_name,
        price_range=place.price_range,
        has_disabled_access=place.has_disabled_access,
        has_toilet_facilities=place.has_toilet_facilities,
        trade_associations=place.trade_associations,
        facebook_url=place.facebook_url,
        instagram_url=place.instagram_url,
        pinterest_url=place.pinterest_url,
        twitter_url=place.twitter_url,
        youtube_url=place.youtube_url,
        snapchat_url=place.snapchat_url,
        tiktok_url=place.tiktok_url,
        specialty_ids=[specialty.id for specialty in place.specialties],
        specialty_names=[specialty.name for specialty in place.specialties],
        hours=[serialize_day(day) for day in hours],
        online_sales_links=[OnlineSalesLinkOut.model_validate(link) for link in place.online_sales_links],
        created_at=place.created_at,
        updated_at=place.updated_at,
    )


def _split_payload(payload: PlaceCreate | PlaceUpdate) -> tuple[dict[str, Any], list[int] | None, list[DayHours] | None]:
    data = payload.model_dump(exclude_unset=True)
    specialty_ids = data.pop("specialty_ids", None)
    hours_data = data.pop("hours", None)
    fields = {_TEXT_ALIASES.get(key, key): value for key, value in data.items()}
    hours = [DayHours(**day) for day in hours_data] if hours_data is not None else None
    return fields, specialty_ids, hours


def parse_id_list(raw: str | None) -> list[int]:
    if not raw:
        return []
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Expected comma-separated ids")


@router.get("", response_model=list[PlaceOut])
async def list_places(
    session: AsyncSession = Depends(get_session),
    type_id: int | None = Query(default=None),
    price_range: str | None = Query(default=None),
    search: str | None = Query(default=None, description="Matches name, address, description and specialties"),
    specialties: str | None = Query(default=None, description="Comma-separated specialty ids"),
) -> list[PlaceOut]:
    places = await place_service.list_places(
        session,
        type_id=type_id,
        price_range=price_range,
        search=search,
        specialty_ids=parse_id_list(specialties),
    )
    return [_serialize_place(place) for place in places]


@router.get("/stats", response_model=DashboardStatsOut)
async def dashboard_stats(session: AsyncSession = Depends(get_session)) -> DashboardStatsOut:
    return DashboardStatsOut(**await place_service.dashboard_stats(session))


@router.get("/{place_id}", response_model=PlaceOut)
async def get_place(place_id: int, session: AsyncSession = Depends(get_session)) -> PlaceOut:
    return _serialize_place(await place_service.get_place(session, place_id))


@router.post("", response_model=PlaceOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_place(payload: PlaceCreate, session: AsyncSession = Depends(get_session)) -> PlaceOut:
    fields, specialty_ids, hours = _split_payload(payload)
    place = await place_service.create_place(session, fields, specialty_ids=specialty_ids, hours=hours)
    return _serialize_place(place)


@router.patch("/{place_id}", response_model=PlaceOut, dependencies=[Depends(require_admin)])
async def update_place(place_id: int, payload: PlaceUpdate, session: AsyncSession = Depends(get_session)) -> PlaceOut:
    fields, specialty_ids, hours = _split_payload(payload)
    place = await place_service.update_place(session, place_id, fields, specialty_ids=specialty_ids, hours=hours)
    return _serialize_place(place)


@router.delete("/{place_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_place(place_id: int, session: AsyncSession = Depends(get_session)) -> Response:
    await place_service.delete_place(session, place_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{place_id}/specialties", response_model=PlaceSpecialtiesOut)
async def get_place_specialties(place_id: int, session: AsyncSession = Depends(get_session)) -> PlaceSpecialtiesOut:
    place = await place_service.get_place(session, place_id)
    split = specialty_service.split_place_specialties(place.specialties)
    return PlaceSpecialtiesOut(
        place_id=place.id,
        main_categories=[SpecialtyOut.model_validate(s) for s in split["main_categories"]],
        subcategories=[SpecialtyOut.model_validate(s) for s in split["subcategories"]],
    )


@router.put("/{place_id}/specialties", response_model=PlaceOut, dependencies=[Depends(require_admin)])
async def replace_place_specialties(
    place_id: int, payload: PlaceSpecialtiesUpdate, session: AsyncSession = Depends(get_session)
) -> PlaceOut:
    place = await place_service.update_place(session, place_id, {}, specialty_ids=payload.specialty_ids)
    return _serialize_place(place)
