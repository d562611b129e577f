from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.models.place import Place
from ..places.validation import looks_fabricated_phone, within_edinburgh
from .report import MaintenanceReport


def missing_details(place: Place) -> list[str]:
    missing = []
    if not place.name or not place.name.strip():
        missing.append("name")
    if not place.address or not place.address.strip():
        missing.append("address")
    if not place.lat or not place.lng:
        missing.append("coordinates")
    if not (place.phone or place.email or place.website):
        missing.append("contact details")
    return missing


async def flag_incomplete(session: AsyncSession, *, dry_run: bool = False) -> MaintenanceReport:
    """Report places lacking core details and clear placeholder ``555-`` phone numbers."""

    report = MaintenanceReport("flag_incomplete", dry_run=dry_run)
    result = await session.execute(select(Place).order_by(Place.id))
    for place in result.scalars().all():
        report.examined += 1
        missing = missing_details(place)
        if missing:
            report.problem(place, "incomplete", missing=missing)
        if place.lat and place.lng and not within_edinburgh(place.lat, place.lng):
            report.problem(place, "coordinates outside Edinburgh", lat=place.lat, lng=place.lng)
        for attr in ("phone", "second_phone"):
            value = getattr(place, attr)
            if looks_fabricated_phone(value):
                setattr(place, attr, None)
                report.change(place, field=attr, cleared=value)

    if dry_run:
        await session.rollback()
    else:
        await session.commit()
    report.log()
    return report
