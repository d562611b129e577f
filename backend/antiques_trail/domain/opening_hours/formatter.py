"""Structured opening hours → display groups and the canonical text field."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal

from .hours import (
    APPOINTMENT_TEXT,
    CLOSED_TEXT,
    DAY_NAMES,
    MONDAY_FIRST,
    UNSPECIFIED_TEXT,
    DayHours,
    normalize_time,
)

Clock = Literal["24h", "12h"]


@dataclass
class HoursGroup:
    day_text: str
    hours: str
    days: list[int] = field(default_factory=list)


def display_time(value: str, clock: Clock = "24h") -> str:
    """``09:00`` → ``9:00`` (24h) or ``9AM`` (12h); unparseable values pass through."""

    normalized = normalize_time(value)
    if normalized is None:
        return value
    hour, minute = (int(part) for part in normalized.split(":"))
    if clock == "12h":
        period = "PM" if hour >= 12 else "AM"
        hour = hour % 12 or 12
        minutes = f":{minute:02d}" if minute else ""
        return f"{hour}{minutes}{period}"
    return f"{hour}:{minute:02d}"


def hours_text(day: DayHours, clock: Clock = "24h") -> str:
    if day.is_closed:
        return CLOSED_TEXT
    if day.is_by_appointment:
        return APPOINTMENT_TEXT
    if day.open_time and day.close_time:
        return f"{display_time(day.open_time, clock)} - {display_time(day.close_time, clock)}"
    return UNSPECIFIED_TEXT


def day_label(days: list[int]) -> str:
    if len(days) == 7:
        return "Every day"
    first, last = DAY_NAMES[days[0]], DAY_NAMES[days[-1]]
    if len(days) == 1:
        return first
    if len(days) == 2:
        return f"{first} & {last}"
    return f"{first} to {last}"


def format_grouped(hours: Iterable[DayHours], clock: Clock = "24h") -> list[HoursGroup]:
    """Group consecutive days (Monday first) that share the same hours."""

    by_day = {day.day_of_week: day for day in hours}
    groups: list[HoursGroup] = []
    previous_position = None

    for position, day_of_week in enumerate(MONDAY_FIRST):
        day = by_day.get(day_of_week)
        if day is None:
            previous_position = None
            continue
        text = hours_text(day, clock)
        if groups and previous_position == position - 1 and groups[-1].hours == text:
            groups[-1].days.append(day_of_week)
        else:
            groups.append(HoursGroup(day_text="", hours=text, days=[day_of_week]))
        previous_position = position

    for group in groups:
        group.day_text = day_label(group.days)
    return groups


def format_opening_hours(hours: Iterable[DayHours], clock: Clock = "24h") -> str:
    """Canonical text for ``places.opening_hours``: one ``<days>: <hours>`` line per group."""

    return "\n".join(f"{group.day_text}: {group.hours}" for group in format_grouped(hours, clock))
