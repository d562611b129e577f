"""Structured opening hours stored per place, with the text field kept in step."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.config import settings
from ...db.models.opening_hours import OpeningHour
from ...db.models.place import Place
from ..opening_hours import DayHours, closing_soon, format_opening_hours, is_by_appointment_on, is_open, normalize_time


def structured_hours(place: Place) -> list[DayHours]:
    return sorted((DayHours.from_row(row) for row in place.opening_hours), key=lambda day: day.day_of_week)


def validate_hours(hours: Sequence[DayHours]) -> list[DayHours]:
    """Reject repeated days and bad times; return the hours with normalized ``HH:MM`` times."""

    seen: set[int] = set()
    cleaned: list[DayHours] = []
    for day in hours:
        if not 0 <= day.day_of_week <= 6:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid day_of_week {day.day_of_week}")
        if day.day_of_week in seen:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=f"Day {day.day_of_week} appears more than once"
            )
        seen.add(day.day_of_week)
        open_time = _checked_time(day.open_time)
        close_time = _checked_time(day.close_time)
        if day.is_closed or day.is_by_appointment:
            open_time = close_time = None
        cleaned.append(
            DayHours(
                day_of_week=day.day_of_week,
                open_time=open_time,
                close_time=close_time,
                is_closed=day.is_closed,
                is_by_appointment=day.is_by_appointment and not day.is_closed,
                notes=day.notes,
            )
        )
    return cleaned


def _checked_time(value: str | None) -> str | None:
    if value is None or not str(value).strip():
        return None
    normalized = normalize_time(value)
    if normalized is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid time {value!r}, expected HH:MM")
    return normalized


def _row(day: DayHours) -> OpeningHour:
    return OpeningHour(
        day_of_week=day.day_of_week,
        open_time=day.open_time,
        close_time=day.close_time,
        is_closed=day.is_closed,
        is_by_appointment=day.is_by_appointment,
        notes=day.notes,
    )


def refresh_hours_text(place: Place) -> None:
    hours = structured_hours(place)
    if hours:
        place.opening_hours_text = format_opening_hours(hours)


async def replace_hours(session: AsyncSession, place: Place, hours: Iterable[DayHours]) -> None:
    """Swap every row for ``hours``. Caller commits."""

    cleaned = validate_hours(list(hours))
    place.opening_hours.clear()
    # Old rows must be gone before the new ones hit the unique (place_id, day_of_week) index.
    await session.flush()
    place.opening_hours.extend(_row(day) for day in cleaned)
    refresh_hours_text(place)


async def upsert_day(session: AsyncSession, place: Place, day: DayHours) -> None:
    (cleaned,) = validate_hours([day])
    for row in place.opening_hours:
        if row.day_of_week == cleaned.day_of_week:
            row.open_time = cleaned.open_time
            row.close_time = cleaned.close_time
            row.is_closed = cleaned.is_closed
            row.is_by_appointment = cleaned.is_by_appointment
            row.notes = cleaned.notes
            break
    else:
        place.opening_hours.append(_row(cleaned))
    refresh_hours_text(place)


async def clear_hours(session: AsyncSession, place: Place) -> None:
    place.opening_hours.clear()
    place.opening_hours_text = None
    await session.flush()


def local_now() -> datetime:
    return datetime.now(ZoneInfo(settings.timezone))


def hours_status(hours: Sequence[DayHours], now: datetime | None = None) -> dict:
    now = now or local_now()
    return {
        "is_open": is_open(hours, now),
        "closing_soon": closing_soon(hours, now, settings.closing_soon_minutes),
        "by_appointment_today": is_by_appointment_on(hours, now),
        "checked_at": now.isoformat(),
    }
