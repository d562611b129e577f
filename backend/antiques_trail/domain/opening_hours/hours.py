from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

# Stored day_of_week: 0 = Sunday … 6 = Saturday.
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
# Display order starts on Monday.
MONDAY_FIRST = (1, 2, 3, 4, 5, 6, 0)

CLOSED_TEXT = "Closed"
APPOINTMENT_TEXT = "By appointment only"
UNSPECIFIED_TEXT = "Hours not specified"

_TIME_RE = re.compile(r"^(\d{1,2})(?:[:.](\d{2}))?\s*(?:([ap])\.?\s*m\.?)?$", re.IGNORECASE)
_NAMED_TIMES = {"noon": (12, 0), "midday": (12, 0), "midnight": (0, 0)}


@dataclass
class DayHours:
    day_of_week: int
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = False
    is_by_appointment: bool = False
    notes: str | None = None

    @classmethod
    def closed(cls, day_of_week: int) -> "DayHours":
        return cls(day_of_week=day_of_week, is_closed=True)

    @classmethod
    def from_row(cls, row: Any) -> "DayHours":
        """Build from anything with the opening-hours attributes (ORM row, schema)."""
        return cls(
            day_of_week=int(row.day_of_week),
            open_time=row.open_time,
            close_time=row.close_time,
            is_closed=bool(row.is_closed),
            is_by_appointment=bool(row.is_by_appointment),
            notes=getattr(row, "notes", None),
        )

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]


def parse_time(value: str) -> tuple[int, int, bool] | None:
    """Return ``(hour, minute, had_meridiem)`` in 24-hour terms, or None."""

    text = value.strip().lower()
    if text in _NAMED_TIMES:
        hour, minute = _NAMED_TIMES[text]
        return hour, minute, True
    match = _TIME_RE.match(text)
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = match.group(3)
    if minute > 59:
        return None
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        if meridiem == "p" and hour < 12:
            hour += 12
        elif meridiem == "a" and hour == 12:
            hour = 0
    elif hour > 23:
        return None
    return hour, minute, meridiem is not None


def normalize_time(value: str | None) -> str | None:
    """Normalize ``9``, ``9:30``, ``9.30am``, ``5pm`` … into zero-padded ``HH:MM``."""

    if value is None:
        return None
    parsed = parse_time(str(value))
    if parsed is None:
        return None
    hour, minute, _ = parsed
    return f"{hour:02d}:{minute:02d}"


def time_to_minutes(value: str | None) -> int | None:
    normalized = normalize_time(value)
    if normalized is None:
        return None
    hour, minute = normalized.split(":")
    return int(hour) * 60 + int(minute)


def default_week() -> list[DayHours]:
    """Mon–Fri 09:00–17:00, Saturday 10:00–16:00, Sunday closed."""

    week = [DayHours.closed(0)]
    week.extend(DayHours(day_of_week=day, open_time="09:00", close_time="17:00") for day in range(1, 6))
    week.append(DayHours(day_of_week=6, open_time="10:00", close_time="16:00"))
    return week
