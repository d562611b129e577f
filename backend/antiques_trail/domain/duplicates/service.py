"""Finding and merging places that were imported more than once."""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.logging import get_logger
from ...db.models.analytics import SpecialtyRequest
from ...db.models.opening_hours import OpeningHour
from ...db.models.place import OnlineSalesLink, Place
from ..maintenance.report import MaintenanceReport
from ..places import hours as hours_store
from ..places.service import PLACE_FIELDS, get_place, reload_place
from ..specialties.service import specialties_text

logger = get_logger(__name__)

_NON_WORD_RE = re.compile(r"[^a-z0-9]+")


def normalize_name(name: str | None) -> str:
    return " ".join((name or "").lower().split())


def normalize_address(address: str | None) -> str:
    return " ".join(_NON_WORD_RE.sub(" ", (address or "").lower()).split())


def levenshtein(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


@dataclass
class SimilarPair:
    first: Place
    second: Place
    distance: int
    contained: bool


async def _all_places(session: AsyncSession) -> list[Place]:
    result = await session.execute(select(Place).order_by(Place.id))
    return list(result.scalars().all())


async def find_exact_duplicates(session: AsyncSession) -> list[list[Place]]:
    groups: dict[str, list[Place]] = defaultdict(list)
    for place in await _all_places(session):
        groups[normalize_name(place.name)].append(place)
    return [group for group in groups.values() if len(group) > 1]


def similar(a: str, b: str, max_distance: int = 3) -> tuple[bool, int, bool]:
    distance = levenshtein(a, b)
    contained = len(min(a, b, key=len)) >= 4 and (a in b or b in a)
    return distance <= max_distance or contained, distance, contained


async def find_similar_names(session: AsyncSession, max_distance: int = 3) -> list[SimilarPair]:
    """Pairs with different names where one contains the other or the edit distance is small."""

    places = await _all_places(session)
    pairs = []
    for index, first in enumerate(places):
        first_name = normalize_name(first.name)
        for second in places[index + 1 :]:
            second_name = normalize_name(second.name)
            if first_name == second_name:
                continue
            matched, distance, contained = similar(first_name, second_name, max_distance)
            if matched:
                pairs.append(SimilarPair(first, second, distance, contained))
    return pairs


async def merge_places(session: AsyncSession, keep_id: int, remove_id: int, *, commit: bool = True) -> Place:
    """Fold ``remove_id`` into ``keep_id`` and delete it."""

    if keep_id == remove_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot merge a place into itself")
    keep = await get_place(session, keep_id)
    remove = await get_place(session, remove_id)

    filled = []
    for key in PLACE_FIELDS:
        if getattr(keep, key) in (None, "") and getattr(remove, key) not in (None, ""):
            setattr(keep, key, getattr(remove, key))
            filled.append(key)

    known = {specialty.id for specialty in keep.specialties}
    added = [specialty for specialty in remove.specialties if specialty.id not in known]
    if added:
        keep.specialties = keep.specialties + added
        keep.specialties_text = specialties_text(keep.specialties)
    elif not keep.specialties_text and remove.specialties_text:
        keep.specialties_text = remove.specialties_text

    have_links = {(link.platform_name.lower(), link.url) for link in keep.online_sales_links}
    for link in remove.online_sales_links:
        if (link.platform_name.lower(), link.url) not in have_links:
            keep.online_sales_links.append(
                OnlineSalesLink(platform_name=link.platform_name, url=link.url, description=link.description)
            )

    moved_hours = False
    if not keep.opening_hours and remove.opening_hours:
        for row in remove.opening_hours:
            keep.opening_hours.append(
                OpeningHour(
                    day_of_week=row.day_of_week,
                    open_time=row.open_time,
                    close_time=row.close_time,
                    is_closed=row.is_closed,
                    is_by_appointment=row.is_by_appointment,
                    notes=row.notes,
                )
            )
        moved_hours = True
    elif not keep.opening_hours and not keep.opening_hours_text:
        keep.opening_hours_text = remove.opening_hours_text

    await session.execute(
        update(SpecialtyRequest).where(SpecialtyRequest.place_id == remove_id).values(place_id=keep_id)
    )
    await session.delete(remove)
    await session.flush()
    if moved_hours:
        hours_store.refresh_hours_text(keep)

    logger.info(
        "places_merged",
        extra={"kept_id": keep_id, "removed_id": remove_id, "filled": filled, "moved_hours": moved_hours},
    )
    if not commit:
        return keep
    await session.commit()
    return await reload_place(session, keep_id)


async def auto_merge(session: AsyncSession, *, dry_run: bool = False) -> MaintenanceReport:
    """Merge exact duplicates at the same address into the most recently imported copy."""

    report = MaintenanceReport("auto_merge_duplicates", dry_run=dry_run)
    for group in await find_exact_duplicates(session):
        by_address: dict[str, list[Place]] = defaultdict(list)
        for place in group:
            by_address[normalize_address(place.address)].append(place)
        for places in by_address.values():
            report.examined += len(places)
            if len(places) < 2:
                continue
            keep = max(places, key=lambda place: place.id)
            removed = sorted(place.id for place in places if place.id != keep.id)
            report.change(keep, merged_ids=removed)
            if dry_run:
                continue
            for remove_id in removed:
                await merge_places(session, keep.id, remove_id, commit=False)

    if dry_run:
        await session.rollback()
    else:
        await session.commit()
    report.log()
    return report


def describe(place: Place) -> dict[str, Any]:
    return {"id": place.id, "name": place.name, "address": place.address, "postcode": place.address_postcode}
