"""Repairs for opening hours: day numbering, time formats, gaps, and text drift."""

from __future__ import annotations

import re

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.models.opening_hours import OpeningHour
from ...db.models.place import Place
from ..opening_hours import (
    DAY_NAMES,
    MONDAY_FIRST,
    DayHours,
    day_label,
    format_opening_hours,
    normalize_time,
    parse_hours,
    parse_opening_hours,
    text_entries,
)
from ..places import hours as hours_store
from .report import MaintenanceReport

_PADDED_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


async def _places(session: AsyncSession) -> list[Place]:
    result = await session.execute(select(Place).order_by(Place.id))
    return list(result.scalars().all())


async def _finish(session: AsyncSession, report: MaintenanceReport) -> MaintenanceReport:
    if report.dry_run:
        await session.rollback()
    else:
        await session.commit()
    report.log()
    return report


def _copy(row: OpeningHour, day_of_week: int) -> OpeningHour:
    return OpeningHour(
        day_of_week=day_of_week,
        open_time=row.open_time,
        close_time=row.close_time,
        is_closed=row.is_closed,
        is_by_appointment=row.is_by_appointment,
        notes=row.notes,
    )


def fully_parseable(text: str | None) -> bool:
    """Every entry names its days and has hours that can be read."""

    entries = text_entries(text)
    return bool(entries) and all(days and parse_hours(hours, days[0]) is not None for days, hours in entries)


def remap_days(days: list[int]) -> dict[int, int]:
    """Target day for each stored value.

    1-7 numbering (7 = Sunday) shifts 7 to 0; any other out-of-range set is
    renumbered by sort order.
    """

    distinct = sorted(set(days))
    if all(0 <= day <= 6 for day in distinct):
        return {day: day for day in distinct}
    if all(1 <= day <= 7 for day in distinct):
        return {day: day % 7 for day in distinct}
    return {day: position for position, day in enumerate(distinct) if position <= 6}


async def normalize_days(session: AsyncSession, *, dry_run: bool = False) -> MaintenanceReport:
    report = MaintenanceReport("normalize_days", dry_run=dry_run)
    for place in await _places(session):
        if not place.opening_hours:
            continue
        report.examined += 1
        rows = sorted(place.opening_hours, key=lambda row: row.id)
        mapping = remap_days([row.day_of_week for row in rows])

        keep: dict[int, OpeningHour] = {}
        dropped: list[OpeningHour] = []
        for row in rows:
            target = mapping.get(row.day_of_week)
            if target is None or target in keep:
                dropped.append(row)
            else:
                keep[target] = row
        moved = [(row, target) for target, row in keep.items() if row.day_of_week != target]
        if not dropped and not moved:
            continue

        for row in dropped + [row for row, _ in moved]:
            place.opening_hours.remove(row)
        await session.flush()
        for row, target in moved:
            place.opening_hours.append(_copy(row, target))
        hours_store.refresh_hours_text(place)
        report.change(
            place,
            removed_duplicates=[row.id for row in dropped],
            remapped={str(row.day_of_week): target for row, target in moved},
        )
    return await _finish(session, report)


async def normalize_times(session: AsyncSession, *, dry_run: bool = False) -> MaintenanceReport:
    report = MaintenanceReport("normalize_times", dry_run=dry_run)
    for place in await _places(session):
        if not place.opening_hours:
            continue
        report.examined += 1
        changed = False
        for row in place.opening_hours:
            for attr in ("open_time", "close_time"):
                value = getattr(row, attr)
                if value is None or (_PADDED_TIME_RE.match(value) and normalize_time(value) == value):
                    continue
                normalized = normalize_time(value)
                setattr(row, attr, normalized)
                changed = True
                if normalized is None:
                    report.problem(place, "unparseable time cleared", day=DAY_NAMES[row.day_of_week], value=value)
                else:
                    report.change(place, day=DAY_NAMES[row.day_of_week], field=attr, old=value, new=normalized)
        if changed:
            hours_store.refresh_hours_text(place)
    return await _finish(session, report)


async def fill_missing_days(session: AsyncSession, *, dry_run: bool = False) -> MaintenanceReport:
    """Give places with partial structured hours a row for every day, without inventing times."""

    report = MaintenanceReport("fill_missing_days", dry_run=dry_run)
    for place in await _places(session):
        if not place.opening_hours:
            continue
        report.examined += 1
        present = {row.day_of_week for row in place.opening_hours}
        missing = [day for day in MONDAY_FIRST if day not in present]
        if not missing:
            continue
        for day in missing:
            place.opening_hours.append(OpeningHour(day_of_week=day))
        hours_store.refresh_hours_text(place)
        report.change(place, added_days=[DAY_NAMES[day] for day in missing])
    return await _finish(session, report)


async def backfill_structured(session: AsyncSession, *, dry_run: bool = False) -> MaintenanceReport:
    report = MaintenanceReport("backfill_structured", dry_run=dry_run)
    for place in await _places(session):
        if place.opening_hours or not place.opening_hours_text:
            continue
        report.examined += 1
        if not fully_parseable(place.opening_hours_text):
            report.problem(place, "opening hours text could not be parsed", text=place.opening_hours_text)
            continue
        parsed = parse_opening_hours(place.opening_hours_text)
        old_text = place.opening_hours_text
        await hours_store.replace_hours(session, place, parsed)
        report.change(place, old_text=old_text, new_text=place.opening_hours_text)
    return await _finish(session, report)


async def resync_text(session: AsyncSession, *, dry_run: bool = False) -> MaintenanceReport:
    report = MaintenanceReport("resync_text", dry_run=dry_run)
    for place in await _places(session):
        if not place.opening_hours:
            continue
        report.examined += 1
        canonical = format_opening_hours(hours_store.structured_hours(place))
        if place.opening_hours_text != canonical:
            report.change(place, old_text=place.opening_hours_text, new_text=canonical)
            place.opening_hours_text = canonical
    return await _finish(session, report)


async def verify_hours(session: AsyncSession) -> MaintenanceReport:
    """Read-only check of the hours data; everything found is a problem entry."""

    report = MaintenanceReport("verify_hours", dry_run=True)
    for place in await _places(session):
        report.examined += 1
        hours = hours_store.structured_hours(place)
        if not hours:
            if place.opening_hours_text and not fully_parseable(place.opening_hours_text):
                report.problem(place, "unparseable text without structured hours", text=place.opening_hours_text)
            continue
        canonical = format_opening_hours(hours)
        if place.opening_hours_text != canonical:
            report.problem(place, "text differs from structured hours", text=place.opening_hours_text, expected=canonical)
        if len(hours) < 7:
            present = {day.day_of_week for day in hours}
            report.problem(place, "missing days", days=[DAY_NAMES[d] for d in MONDAY_FIRST if d not in present])
        appointment_days = [day.day_name for day in hours if day.is_by_appointment]
        if appointment_days:
            report.problem(place, "by appointment", days=appointment_days)
    await session.rollback()
    report.log()
    return report


def _label(days: list[int]) -> str:
    ordered = sorted(set(days), key=MONDAY_FIRST.index)
    positions = [MONDAY_FIRST.index(day) for day in ordered]
    if positions == list(range(positions[0], positions[0] + len(positions))):
        return day_label(ordered)
    return " & ".join(DAY_NAMES[day] for day in ordered)


def standardize_hours_text(text: str) -> str:
    """Re-order text entries Monday first, one per line, keeping the hours wording as written."""

    entries = text_entries(text)
    readable = [(days, hours) for days, hours in entries if days]
    unreadable = [hours for days, hours in entries if not days]
    readable.sort(key=lambda entry: min(MONDAY_FIRST.index(day) for day in entry[0]))

    merged: list[tuple[list[int], str]] = []
    for days, hours in readable:
        if merged and merged[-1][1].lower() == hours.lower():
            merged[-1] = (merged[-1][0] + days, merged[-1][1])
        else:
            merged.append((list(days), hours))
    lines = [f"{_label(days)}: {hours}" for days, hours in merged]
    return "\n".join(lines + unreadable)


async def standardize_text(session: AsyncSession, *, dry_run: bool = False) -> MaintenanceReport:
    report = MaintenanceReport("standardize_text", dry_run=dry_run)
    for place in await _places(session):
        if place.opening_hours or not place.opening_hours_text:
            continue
        if fully_parseable(place.opening_hours_text):
            # backfill_structured handles text that parses.
            continue
        report.examined += 1
        standardized = standardize_hours_text(place.opening_hours_text)
        if standardized and standardized != place.opening_hours_text:
            report.change(place, old_text=place.opening_hours_text, new_text=standardized)
            place.opening_hours_text = standardized
    return await _finish(session, report)


COMMANDS = {
    "normalize-days": normalize_days,
    "normalize-times": normalize_times,
    "fill-missing-days": fill_missing_days,
    "backfill-structured": backfill_structured,
    "resync-text": resync_text,
    "standardize-text": standardize_text,
}
