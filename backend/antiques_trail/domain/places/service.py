from __future__ import annotations

from typing import Any, Sequence

from fastapi import HTTPException, status
from sqlalchemy import distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.config import settings
from ...core.logging import get_logger
from ...db.models.opening_hours import OpeningHour
from ...db.models.place import PRICE_RANGES, Place, PlaceType
from ...db.models.specialty import PlaceSpecialty, Specialty
from ..opening_hours import DayHours, parse_opening_hours
from ..specialties import service as specialty_service
from . import hours as hours_store
from .validation import (
    blank_to_none,
    format_uk_postcode,
    format_website_url,
    is_valid_email,
    is_valid_uk_phone,
    is_valid_uk_postcode,
    is_valid_website,
    within_edinburgh,
)

logger = get_logger(__name__)

TEXT_FIELDS = (
    "name",
    "address",
    "address_street",
    "address_area",
    "address_city",
    "address_postcode",
    "phone",
    "second_phone",
    "email",
    "website",
    "description",
    "price_range",
    "trade_associations",
    "facebook_url",
    "instagram_url",
    "pinterest_url",
    "twitter_url",
    "youtube_url",
    "snapchat_url",
    "tiktok_url",
)
PLACE_FIELDS = TEXT_FIELDS + ("lat", "lng", "type_id", "has_disabled_access", "has_toilet_facilities")
REQUIRED_FIELDS = ("name", "address", "lat", "lng", "type_id")


def clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Normalize user-supplied place fields and reject malformed contact details."""

    cleaned = dict(fields)
    for key in TEXT_FIELDS:
        if key in cleaned and isinstance(cleaned[key], str):
            cleaned[key] = blank_to_none(cleaned[key])
    for key in ("has_disabled_access", "has_toilet_facilities"):
        if key in cleaned and cleaned[key] is None:
            del cleaned[key]
    if "website" in cleaned:
        cleaned["website"] = format_website_url(cleaned["website"])
    if "address_postcode" in cleaned:
        cleaned["address_postcode"] = format_uk_postcode(cleaned["address_postcode"])

    errors = []
    for key in ("phone", "second_phone"):
        if not is_valid_uk_phone(cleaned.get(key)):
            errors.append(f"{key} is not a valid UK phone number")
    if not is_valid_email(cleaned.get("email")):
        errors.append("email is not a valid email address")
    if not is_valid_website(cleaned.get("website")):
        errors.append("website is not a valid URL")
    if not is_valid_uk_postcode(cleaned.get("address_postcode")):
        errors.append("address_postcode is not a valid UK postcode")
    if cleaned.get("price_range") is not None and cleaned["price_range"] not in PRICE_RANGES:
        errors.append(f"price_range must be one of {', '.join(PRICE_RANGES)}")
    if errors:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="; ".join(errors))
    return cleaned


async def get_place(session: AsyncSession, place_id: int) -> Place:
    place = await session.get(Place, place_id)
    if place is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Place not found")
    return place


async def reload_place(session: AsyncSession, place_id: int) -> Place:
    result = await session.execute(
        select(Place).where(Place.id == place_id).execution_options(populate_existing=True)
    )
    return result.scalars().one()


def _linked_to(specialty_ids: Sequence[int]):
    return Place.id.in_(select(PlaceSpecialty.place_id).where(PlaceSpecialty.specialty_id.in_(specialty_ids)))


async def list_places(
    session: AsyncSession,
    *,
    type_id: int | None = None,
    price_range: str | None = None,
    search: str | None = None,
    specialty_ids: Sequence[int] | None = None,
) -> list[Place]:
    stmt = select(Place).order_by(Place.name, Place.id)
    if type_id is not None:
        stmt = stmt.where(Place.type_id == type_id)
    if price_range:
        stmt = stmt.where(Place.price_range == price_range)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        named = (
            select(PlaceSpecialty.place_id)
            .join(Specialty, Specialty.id == PlaceSpecialty.specialty_id)
            .where(Specialty.name.ilike(pattern))
        )
        stmt = stmt.where(
            or_(
                Place.name.ilike(pattern),
                Place.address.ilike(pattern),
                Place.description.ilike(pattern),
                Place.specialties_text.ilike(pattern),
                Place.id.in_(named),
            )
        )
    if specialty_ids:
        selected = await specialty_service.list_specialties(session, ids=list(specialty_ids))
        mains = [s.id for s in selected if s.parent_id is None]
        subs = [s for s in selected if s.parent_id is not None]
        if subs and mains:
            stmt = stmt.where(_linked_to([s.id for s in subs]))
        elif subs:
            stmt = stmt.where(
                or_(_linked_to([s.id for s in subs]), *(Place.specialties_text.ilike(f"%{s.name}%") for s in subs))
            )
        elif mains:
            children = select(Specialty.id).where(Specialty.parent_id.in_(mains))
            stmt = stmt.where(
                or_(
                    _linked_to(mains),
                    Place.id.in_(select(PlaceSpecialty.place_id).where(PlaceSpecialty.specialty_id.in_(children))),
                )
            )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def _ensure_type(session: AsyncSession, type_id: int) -> None:
    if await session.get(PlaceType, type_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown place type {type_id}")


async def _apply_hours(
    session: AsyncSession, place: Place, hours: Sequence[DayHours] | None, text_given: bool, text: str | None
) -> None:
    if hours is not None:
        await hours_store.replace_hours(session, place, hours)
        return
    if not text_given:
        return
    if not text:
        if place.opening_hours:
            await hours_store.clear_hours(session, place)
        place.opening_hours_text = None
        return
    parsed = parse_opening_hours(text)
    if parsed:
        await hours_store.replace_hours(session, place, parsed)
    elif place.opening_hours:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Opening hours text could not be parsed; edit the structured hours instead",
        )
    else:
        place.opening_hours_text = text


async def _apply_specialties(
    session: AsyncSession, place: Place, specialty_ids: Sequence[int] | None, text_given: bool, text: str | None
) -> None:
    if specialty_ids is not None:
        await specialty_service.set_place_specialties(session, place, specialty_ids)
    elif text_given:
        await specialty_service.sync_specialties_from_text(session, place, text)


def _warn_if_outside_edinburgh(place: Place) -> None:
    if not within_edinburgh(place.lat, place.lng):
        logger.warning(
            "place_outside_edinburgh",
            extra={"place_id": place.id, "place_name": place.name, "lat": place.lat, "lng": place.lng},
        )


async def create_place(
    session: AsyncSession,
    fields: dict[str, Any],
    *,
    specialty_ids: Sequence[int] | None = None,
    hours: Sequence[DayHours] | None = None,
    commit: bool = True,
) -> Place:
    """Create a place from plain field values.

    ``fields`` may also carry ``specialties_text`` and ``opening_hours_text``;
    explicit ``specialty_ids`` and structured ``hours`` take precedence over them.
    """

    cleaned = clean_fields(fields)
    missing = [key for key in REQUIRED_FIELDS if cleaned.get(key) is None]
    if missing:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Missing required fields: {', '.join(missing)}")
    await _ensure_type(session, cleaned["type_id"])

    place = Place(
        **{key: cleaned[key] for key in PLACE_FIELDS if key in cleaned},
        opening_hours=[],
        specialties=[],
        online_sales_links=[],
    )
    if place.address_city is None:
        place.address_city = settings.default_city
    session.add(place)
    await _apply_specialties(
        session, place, specialty_ids, "specialties_text" in cleaned, cleaned.get("specialties_text")
    )
    await _apply_hours(session, place, hours, "opening_hours_text" in cleaned, cleaned.get("opening_hours_text"))
    await session.flush()
    _warn_if_outside_edinburgh(place)
    logger.info("place_created", extra={"place_id": place.id, "place_name": place.name})
    if not commit:
        return place
    await session.commit()
    return await reload_place(session, place.id)


async def update_place(
    session: AsyncSession,
    place_id: int,
    changes: dict[str, Any],
    *,
    specialty_ids: Sequence[int] | None = None,
    hours: Sequence[DayHours] | None = None,
) -> Place:
    place = await get_place(session, place_id)
    cleaned = clean_fields(changes)
    for key in REQUIRED_FIELDS:
        if key in cleaned and cleaned[key] is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{key} cannot be empty")
    if "type_id" in cleaned:
        await _ensure_type(session, cleaned["type_id"])

    for key in PLACE_FIELDS:
        if key in cleaned:
            setattr(place, key, cleaned[key])
    await _apply_specialties(
        session, place, specialty_ids, "specialties_text" in cleaned, cleaned.get("specialties_text")
    )
    await _apply_hours(session, place, hours, "opening_hours_text" in cleaned, cleaned.get("opening_hours_text"))
    if "lat" in cleaned or "lng" in cleaned:
        _warn_if_outside_edinburgh(place)
    await session.commit()
    logger.info("place_updated", extra={"place_id": place_id, "fields": sorted(cleaned)})
    return await reload_place(session, place_id)


async def delete_place(session: AsyncSession, place_id: int) -> None:
    place = await get_place(session, place_id)
    await session.delete(place)
    await session.commit()
    logger.info("place_deleted", extra={"place_id": place_id})


def _price_order(price_range: str | None) -> tuple[int, str]:
    if price_range in PRICE_RANGES:
        return PRICE_RANGES.index(price_range), ""
    return len(PRICE_RANGES), price_range or ""


async def dashboard_stats(session: AsyncSession) -> dict[str, Any]:
    total_places = await session.scalar(select(func.count(Place.id)))
    total_types = await session.scalar(select(func.count(PlaceType.id)))
    total_specialties = await session.scalar(select(func.count(Specialty.id)))
    with_hours = await session.scalar(select(func.count(distinct(OpeningHour.place_id))))

    by_type_rows = await session.execute(
        select(PlaceType.id, PlaceType.name, func.count(Place.id))
        .outerjoin(Place, Place.type_id == PlaceType.id)
        .group_by(PlaceType.id)
        .order_by(PlaceType.name)
    )
    by_price_rows = await session.execute(select(Place.price_range, func.count(Place.id)).group_by(Place.price_range))
    by_price = sorted(by_price_rows.all(), key=lambda row: _price_order(row[0]))

    return {
        "total_places": total_places or 0,
        "total_types": total_types or 0,
        "total_specialties": total_specialties or 0,
        "places_with_structured_hours": with_hours or 0,
        "by_type": [{"type_id": row[0], "type_name": row[1], "count": row[2]} for row in by_type_rows.all()],
        "by_price_range": [{"price_range": row[0], "count": row[1]} for row in by_price],
    }
