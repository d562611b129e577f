"""Free-text opening hours → structured :class:`DayHours`.

Handles the layouts found in the imported data, for example::

    Mon-Fri: 9am-5pm, Sat: 10-4, Sun: Closed
    Monday to Friday: 9:30 - 17:00
    Saturday & Sunday: By appointment only
"""

from __future__ import annotations

import re

from .hours import DayHours, parse_time

DAY_ALIASES = {
    "sun": 0, "sunday": 0,
    "mon": 1, "monday": 1,
    "tue": 2, "tues": 2, "tuesday": 2,
    "wed": 3, "weds": 3, "wednesday": 3,
    "thu": 4, "thur": 4, "thurs": 4, "thursday": 4,
    "fri": 5, "friday": 5,
    "sat": 6, "saturday": 6,
}
EVERY_DAY = {"every day", "everyday", "daily", "all week"}

_ENTRY_SPLIT_RE = re.compile(r"[\n;,]+")
_ENTRY_RE = re.compile(r"^([A-Za-z][A-Za-z .&/\-–—]*?)\s*:\s*(.+)$")
_DAY_RANGE_RE = re.compile(r"^([a-z]+)\.?\s*(?:-|–|—|\bto\b|\buntil\b|\bthrough\b|\bthru\b)\s*([a-z]+)\.?$")
_DAY_LIST_SPLIT_RE = re.compile(r"\s*(?:&|/|\band\b)\s*")
_TIME_TOKEN = r"(?:\d{1,2}(?:[:.]\d{2})?\s*(?:[ap]\.?\s*m\.?)?|noon|midday|midnight)"
_TIME_RANGE_RE = re.compile(
    rf"({_TIME_TOKEN})\s*(?:-|–|—|\bto\b|\buntil\b)\s*({_TIME_TOKEN})",
    re.IGNORECASE,
)


def day_range(start: int, end: int) -> list[int]:
    """Days from ``start`` to ``end`` inclusive, wrapping past Saturday."""

    days = [start]
    day = start
    while day != end:
        day = (day + 1) % 7
        days.append(day)
    return days


def parse_days(text: str) -> list[int]:
    """Parse a day expression (``Mon``, ``Mon-Fri``, ``Sat & Sun``, ``Daily``)."""

    cleaned = " ".join(text.strip().lower().split()).rstrip(".")
    if not cleaned:
        return []
    if cleaned in EVERY_DAY:
        return list(range(7))
    if cleaned in DAY_ALIASES:
        return [DAY_ALIASES[cleaned]]

    match = _DAY_RANGE_RE.match(cleaned)
    if match:
        start, end = match.group(1), match.group(2)
        if start in DAY_ALIASES and end in DAY_ALIASES:
            return day_range(DAY_ALIASES[start], DAY_ALIASES[end])
        return []

    parts = [part.rstrip(".") for part in _DAY_LIST_SPLIT_RE.split(cleaned) if part]
    if len(parts) > 1 and all(part in DAY_ALIASES for part in parts):
        return [DAY_ALIASES[part] for part in parts]
    return []


def parse_hours(text: str, day_of_week: int) -> DayHours | None:
    """Parse the hours half of an entry for a single day."""

    lowered = text.lower()
    if "closed" in lowered:
        return DayHours.closed(day_of_week)
    if "appointment" in lowered:
        return DayHours(day_of_week=day_of_week, is_by_appointment=True)
    if "not specified" in lowered or "unknown" in lowered:
        return DayHours(day_of_week=day_of_week)

    match = _TIME_RANGE_RE.search(text)
    if not match:
        return None
    opening = parse_time(match.group(1))
    closing = parse_time(match.group(2))
    if opening is None or closing is None:
        return None

    open_hour, open_minute, _ = opening
    close_hour, close_minute, close_meridiem = closing
    # "10-4" means 10:00-16:00, not an overnight range.
    if (
        not close_meridiem
        and close_hour < 12
        and open_hour <= 12
        and close_hour * 60 + close_minute < open_hour * 60 + open_minute
    ):
        close_hour += 12

    return DayHours(
        day_of_week=day_of_week,
        open_time=f"{open_hour:02d}:{open_minute:02d}",
        close_time=f"{close_hour:02d}:{close_minute:02d}",
    )


def parse_opening_hours(text: str | None) -> list[DayHours]:
    """Parse free-form opening hours into seven :class:`DayHours`.

    Days the text does not mention are closed. When no entry can be
    recognised at all the result is an empty list, so callers can tell
    "unparseable" apart from "closed all week".
    """

    if not text or not text.strip():
        return []

    week = {day: DayHours.closed(day) for day in range(7)}
    recognised = False
    pending_days: list[int] = []

    for raw_entry in _ENTRY_SPLIT_RE.split(text):
        entry = raw_entry.strip()
        if not entry:
            continue
        match = _ENTRY_RE.match(entry)
        if not match:
            # "Mon, Tue: 10-5" splits into "Mon" and "Tue: 10-5".
            pending_days.extend(parse_days(entry))
            continue

        days = pending_days + parse_days(match.group(1))
        pending_days = []
        if not days:
            continue
        for day in days:
            hours = parse_hours(match.group(2), day)
            if hours is None:
                break
            week[day] = hours
            recognised = True

    if not recognised:
        return []
    return [week[day] for day in range(7)]


def text_entries(text: str | None) -> list[tuple[list[int], str]]:
    """Split text into ``(days, hours text)`` pairs without interpreting the hours.

    Entries whose days cannot be read come back with an empty day list.
    """

    entries: list[tuple[list[int], str]] = []
    pending_days: list[int] = []
    for raw_entry in _ENTRY_SPLIT_RE.split(text or ""):
        entry = raw_entry.strip()
        if not entry:
            continue
        match = _ENTRY_RE.match(entry)
        if not match:
            days = parse_days(entry)
            if days:
                pending_days.extend(days)
            else:
                entries.append(([], entry))
            continue
        entries.append((pending_days + parse_days(match.group(1)), match.group(2).strip()))
        pending_days = []
    return entries
