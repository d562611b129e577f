from typing import Awaitable, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from antiques_trail.db.models.opening_hours import OpeningHour
from antiques_trail.db.models.place import Place
from antiques_trail.domain.maintenance.hours import (
    backfill_structured,
    fill_missing_days,
    normalize_days,
    normalize_times,
    resync_text,
    standardize_text,
    verify_hours,
)
from antiques_trail.domain.maintenance.places import flag_incomplete
from antiques_trail.domain.opening_hours import DayHours
from antiques_trail.domain.places.service import reload_place

MakePlace = Callable[..., Awaitable[Place]]


async def _with_text(session: AsyncSession, make_place: MakePlace, text: str, **fields) -> int:
    """A place whose text was written directly, with no structured rows."""

    place = await make_place(**fields)
    place.opening_hours_text = text
    await session.commit()
    return place.id


async def test_backfill_dry_run_then_apply(session: AsyncSession, make_place: MakePlace) -> None:
    place_id = await _with_text(session, make_place, "Mon-Fri: 9-5")

    report = await backfill_structured(session, dry_run=True)
    assert report.dry_run is True
    assert [change["place_id"] for change in report.changes] == [place_id]
    place = await reload_place(session, place_id)
    assert place.opening_hours == []
    assert place.opening_hours_text == "Mon-Fri: 9-5"

    report = await backfill_structured(session)
    place = await reload_place(session, place_id)
    assert len(place.opening_hours) == 7
    assert place.opening_hours_text == "Monday to Friday: 9:00 - 17:00\nSaturday & Sunday: Closed"
    assert report.changes[0]["new_text"] == place.opening_hours_text


async def test_backfill_leaves_partly_readable_text(session: AsyncSession, make_place: MakePlace) -> None:
    place_id = await _with_text(session, make_place, "Mon-Fri: 9-5, Sat: ring the bell")

    report = await backfill_structured(session)

    assert report.changes == []
    assert report.problems[0]["reason"] == "opening hours text could not be parsed"
    place = await reload_place(session, place_id)
    assert place.opening_hours == []


async def test_fill_missing_days_adds_rows_without_times(session: AsyncSession, make_place: MakePlace) -> None:
    place = await make_place(hours=[DayHours(day_of_week=1, open_time="10:00", close_time="17:00")])
    place_id = place.id

    report = await fill_missing_days(session)

    assert report.changes[0]["added_days"] == ["Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    place = await reload_place(session, place_id)
    assert len(place.opening_hours) == 7
    assert all(row.open_time is None for row in place.opening_hours if row.day_of_week != 1)
    assert place.opening_hours_text == "Monday: 10:00 - 17:00\nTuesday to Sunday: Hours not specified"


async def test_normalize_times(session: AsyncSession, make_place: MakePlace) -> None:
    place = await make_place(
        hours=[
            DayHours(day_of_week=1, open_time="10:00", close_time="17:00"),
            DayHours(day_of_week=2, open_time="10:00", close_time="17:00"),
        ]
    )
    place_id = place.id
    monday, tuesday = place.opening_hours
    monday.open_time, monday.close_time = "9:30", "5pm"
    tuesday.close_time = "late"
    await session.commit()

    report = await normalize_times(session)

    assert {(change["field"], change["new"]) for change in report.changes} == {("open_time", "09:30"), ("close_time", "17:00")}
    assert [problem["value"] for problem in report.problems] == ["late"]
    place = await reload_place(session, place_id)
    assert (place.opening_hours[0].open_time, place.opening_hours[0].close_time) == ("09:30", "17:00")
    assert place.opening_hours[1].close_time is None


async def test_resync_text_and_verify(session: AsyncSession, make_place: MakePlace) -> None:
    place = await make_place(
        hours=[
            DayHours(day_of_week=1, open_time="10:00", close_time="17:00"),
            DayHours(day_of_week=6, is_by_appointment=True),
        ]
    )
    place_id = place.id
    place.opening_hours_text = "Mondays ten till five"
    await session.commit()

    problems = {problem["reason"] for problem in (await verify_hours(session)).problems}
    assert problems == {"text differs from structured hours", "missing days", "by appointment"}

    report = await resync_text(session, dry_run=True)
    assert report.changes[0]["old_text"] == "Mondays ten till five"
    assert (await reload_place(session, place_id)).opening_hours_text == "Mondays ten till five"

    await resync_text(session)
    place = await reload_place(session, place_id)
    assert place.opening_hours_text == "Monday: 10:00 - 17:00\nSaturday: By appointment only"


async def test_normalize_days_leaves_valid_rows_alone(session: AsyncSession, make_place: MakePlace) -> None:
    await make_place(hours=[DayHours.closed(day) for day in range(7)])

    report = await normalize_days(session)

    assert report.examined == 1
    assert report.changes == []


async def _with_raw_days(session: AsyncSession, make_place: MakePlace, name: str, days: range) -> Place:
    """A place whose rows use day numbers outside 0-6, as older imports wrote them."""

    place = await make_place(name=name)
    for day in days:
        place.opening_hours.append(
            OpeningHour(day_of_week=day, open_time="10:00", close_time="17:00", is_closed=False, is_by_appointment=False)
        )
    await session.commit()
    return place


async def test_normalize_days_repairs_stored_rows(session: AsyncSession, make_place: MakePlace) -> None:
    await session.execute(text("PRAGMA ignore_check_constraints = ON"))
    monday_first = await _with_raw_days(session, make_place, "Monday First Antiques", range(1, 8))
    eight_days = await _with_raw_days(session, make_place, "Eight Day Antiques", range(0, 8))
    extra_row_id = max(row.id for row in eight_days.opening_hours if row.day_of_week == 7)

    report = await normalize_days(session)

    assert report.examined == 2
    changes = {change["place_id"]: change for change in report.changes}
    assert changes[monday_first.id]["remapped"] == {"7": 0}
    assert changes[monday_first.id]["removed_duplicates"] == []
    assert changes[eight_days.id]["remapped"] == {}
    assert changes[eight_days.id]["removed_duplicates"] == [extra_row_id]

    for place_id in (monday_first.id, eight_days.id):
        place = await reload_place(session, place_id)
        assert [row.day_of_week for row in place.opening_hours] == list(range(7))
        assert place.opening_hours_text == "Every day: 10:00 - 17:00"

    assert (await normalize_days(session)).changes == []


async def test_standardize_text(session: AsyncSession, make_place: MakePlace) -> None:
    place_id = await _with_text(session, make_place, "Sun: closed, Mon-Sat: 10ish till late, phone ahead")

    report = await standardize_text(session)

    assert len(report.changes) == 1
    place = await reload_place(session, place_id)
    assert place.opening_hours_text == "Monday to Saturday: 10ish till late\nSunday: closed\nphone ahead"


async def test_flag_incomplete(session: AsyncSession, make_place: MakePlace) -> None:
    placeholder = await make_place(name="Placeholder Antiques")
    placeholder_id = placeholder.id
    placeholder.phone = "555-0199"
    await session.commit()
    await make_place(name="Glasgow Dealer", lat=55.8642, lng=-4.2518)
    await make_place(name="No Contact", phone=None)

    report = await flag_incomplete(session, dry_run=True)
    assert report.changes == [{"place_id": placeholder_id, "name": "Placeholder Antiques", "field": "phone", "cleared": "555-0199"}]
    assert {(problem["name"], problem["reason"]) for problem in report.problems} == {
        ("Glasgow Dealer", "coordinates outside Edinburgh"),
        ("No Contact", "incomplete"),
    }
    assert (await reload_place(session, placeholder_id)).phone == "555-0199"

    await flag_incomplete(session)
    assert (await reload_place(session, placeholder_id)).phone is None
