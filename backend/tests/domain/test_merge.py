from typing import Awaitable, Callable

import pytest
from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from antiques_trail.db.models.place import OnlineSalesLink, Place
from antiques_trail.domain.duplicates.service import auto_merge, find_exact_duplicates, find_similar_names, merge_places
from antiques_trail.domain.opening_hours import DayHours
from antiques_trail.domain.specialties import service as specialty_service

MakePlace = Callable[..., Awaitable[Place]]


async def _count(session: AsyncSession) -> int:
    return await session.scalar(select(func.count(Place.id)))


async def test_merge_fills_gaps_and_moves_related_rows(session: AsyncSession, make_place: MakePlace) -> None:
    keep = await make_place(specialties_text="Silver")
    remove = await make_place(
        website="georgianantiques.net",
        specialties_text="Clocks, Silver",
        hours=[DayHours(day_of_week=1, open_time="10:00", close_time="17:00")],
    )
    keep_id, remove_id = keep.id, remove.id
    remove.online_sales_links.append(OnlineSalesLink(platform_name="eBay", url="https://ebay.co.uk/str/g"))
    await session.commit()
    await specialty_service.submit_request(session, remove_id, "Maps too")

    merged = await merge_places(session, keep_id, remove_id)

    assert merged.id == keep_id
    assert merged.website == "https://georgianantiques.net"
    assert [specialty.name for specialty in merged.specialties] == ["Clocks", "Silver"]
    assert merged.specialties_text == "Clocks, Silver"
    assert [link.platform_name for link in merged.online_sales_links] == ["eBay"]
    assert [row.day_of_week for row in merged.opening_hours] == [1]
    assert merged.opening_hours_text == "Monday: 10:00 - 17:00"
    assert await session.get(Place, remove_id) is None
    requests = await specialty_service.list_requests(session, place_id=keep_id)
    assert [request.request_text for request in requests] == ["Maps too"]


async def test_merge_into_itself_is_rejected(session: AsyncSession, make_place: MakePlace) -> None:
    place = await make_place()
    with pytest.raises(HTTPException) as excinfo:
        await merge_places(session, place.id, place.id)
    assert excinfo.value.status_code == 400


async def test_finders(session: AsyncSession, make_place: MakePlace) -> None:
    await make_place(name="Georgian Antiques")
    await make_place(name="georgian  antiques")
    await make_place(name="Georgian Antique")
    await make_place(name="Armchair Books")

    exact = await find_exact_duplicates(session)
    assert [[place.name for place in group] for group in exact] == [["Georgian Antiques", "georgian  antiques"]]

    pairs = await find_similar_names(session)
    assert {(pair.first.name, pair.second.name) for pair in pairs} == {
        ("Georgian Antiques", "Georgian Antique"),
        ("georgian  antiques", "Georgian Antique"),
    }
    assert all(pair.contained for pair in pairs)


async def test_auto_merge_keeps_newest_copy_per_address(session: AsyncSession, make_place: MakePlace) -> None:
    await make_place(address="10 Pattison Street, Leith")
    newest = await make_place(address="10 PATTISON STREET LEITH")
    other_branch = await make_place(address="Unit 2, Bonnington Mill")
    newest_id, other_id = newest.id, other_branch.id

    report = await auto_merge(session, dry_run=True)
    assert report.changes[0]["place_id"] == newest_id
    assert await _count(session) == 3

    report = await auto_merge(session)
    assert len(report.changes) == 1
    assert await _count(session) == 2
    remaining = set((await session.execute(select(Place.id))).scalars())
    assert remaining == {newest_id, other_id}
