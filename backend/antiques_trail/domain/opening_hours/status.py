from __future__ import annotations

from datetime import datetime
from typing import Iterable

from .hours import DayHours, time_to_minutes

MINUTES_PER_DAY = 24 * 60


def day_of_week_for(moment: datetime) -> int:
    """Python's Monday=0 weekday mapped onto the stored Sunday=0 numbering."""
    return (moment.weekday() + 1) % 7


def _span(day: DayHours | None) -> tuple[int, int] | None:
    if day is None or day.is_closed or day.is_by_appointment:
        return None
    opening = time_to_minutes(day.open_time)
    closing = time_to_minutes(day.close_time)
    if opening is None or closing is None or opening == closing:
        return None
    return opening, closing


def minutes_until_close(hours: Iterable[DayHours], now: datetime) -> int | None:
    """Minutes until the place closes, or None when it is not open at ``now``."""

    by_day = {day.day_of_week: day for day in hours}
    today = day_of_week_for(now)
    current = now.hour * 60 + now.minute

    span = _span(by_day.get(today))
    if span is not None:
        opening, closing = span
        if closing > opening:
            if opening <= current < closing:
                return closing - current
        elif current >= opening:
            return closing + MINUTES_PER_DAY - current

    # Yesterday's overnight hours spilling past midnight.
    yesterday = _span(by_day.get((today - 1) % 7))
    if yesterday is not None:
        opening, closing = yesterday
        if closing < opening and current < closing:
            return closing - current
    return None


def is_open(hours: Iterable[DayHours], now: datetime) -> bool:
    return minutes_until_close(hours, now) is not None


def closing_soon(hours: Iterable[DayHours], now: datetime, threshold_minutes: int = 60) -> bool:
    remaining = minutes_until_close(hours, now)
    return remaining is not None and 0 < remaining <= threshold_minutes


def is_by_appointment_on(hours: Iterable[DayHours], now: datetime) -> bool:
    today = day_of_week_for(now)
    return any(day.day_of_week == today and day.is_by_appointment for day in hours)
