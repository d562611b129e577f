"""Bulk import of places from CSV or JSON exports."""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from fastapi import HTTPException
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.logging import get_logger
from ...db.models.place import OnlineSalesLink, Place
from ..geocoding import PostcodeGeocoder
from ..opening_hours import DayHours
from ..opening_hours.parser import parse_hours
from ..place_types.service import find_place_type, get_or_create_place_type
from ..places.service import clean_fields, create_place
from ..places.validation import blank_to_none, format_uk_postcode, format_website_url

logger = get_logger(__name__)

# CSV per-day columns, stored day_of_week 0 = Sunday.
DAY_COLUMNS = {
    "opening_hours_mon": 1,
    "opening_hours_tue": 2,
    "opening_hours_wed": 3,
    "opening_hours_thu": 4,
    "opening_hours_fri": 5,
    "opening_hours_sat": 6,
    "opening_hours_sun": 0,
}
COPIED_FIELDS = ("name", "address", "phone", "email", "website", "description", "price_range")


@dataclass
class ImportReport:
    created: list[str] = field(default_factory=list)
    skipped: list[dict[str, Any]] = field(default_factory=list)
    failed: list[dict[str, Any]] = field(default_factory=list)
    created_types: list[str] = field(default_factory=list)
    dry_run: bool = False

    def skip(self, row: int, name: str | None, reason: str) -> None:
        self.skipped.append({"row": row, "name": name, "reason": reason})
        logger.info("import_row_skipped", extra={"row": row, "place_name": name, "reason": reason})

    def fail(self, row: int, name: str | None, error: str) -> None:
        self.failed.append({"row": row, "name": name, "error": error})
        logger.warning("import_row_failed", extra={"row": row, "place_name": name, "error": error})

    def as_dict(self) -> dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "created": self.created,
            "created_types": self.created_types,
            "skipped": self.skipped,
            "failed": self.failed,
        }


def read_csv(path: str | Path) -> list[dict[str, Any]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as handle:
        return [dict(row) for row in csv.DictReader(handle)]


def read_json(path: str | Path) -> list[dict[str, Any]]:
    """Accept either a list of records or ``{"places": [...]}``."""

    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if isinstance(payload, dict):
        payload = payload.get("places", [])
    if not isinstance(payload, list):
        raise ValueError(f"{path}: expected a list of place records")
    return [dict(item) for item in payload]


def read_records(path: str | Path) -> list[dict[str, Any]]:
    return read_json(path) if Path(path).suffix.lower() == ".json" else read_csv(path)


def _text(record: dict[str, Any], key: str) -> str | None:
    value = record.get(key)
    if value is None:
        return None
    return blank_to_none(str(value))


def _coordinate(value: Any) -> float | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def day_columns(record: dict[str, Any]) -> list[DayHours]:
    """Structured hours from the ``opening_hours_<day>`` columns that are filled in."""

    hours = []
    for column, day_of_week in DAY_COLUMNS.items():
        text = _text(record, column)
        if text is None:
            continue
        parsed = parse_hours(text, day_of_week)
        if parsed is not None:
            hours.append(parsed)
    return hours


def sales_links(record: dict[str, Any]) -> list[dict[str, str | None]]:
    links = []
    index = 1
    while _text(record, f"online_sales_platform{index}"):
        platform = _text(record, f"online_sales_platform{index}")
        url = _text(record, f"online_sales_url{index}")
        if url:
            links.append(
                {
                    "platform_name": platform,
                    "url": format_website_url(url),
                    "description": _text(record, f"online_sales_desc{index}"),
                }
            )
        index += 1
    return links


async def find_existing(session: AsyncSession, name: str, postcode: str | None, address: str | None) -> Place | None:
    """A place with the same name (any case) and the same postcode or address."""

    matches = []
    if postcode:
        matches.append(func.upper(Place.address_postcode) == postcode.upper())
    if address:
        matches.append(func.lower(Place.address) == address.lower())
    if not matches:
        return None
    result = await session.execute(
        select(Place).where(func.lower(Place.name) == name.lower(), or_(*matches)).limit(1)
    )
    return result.scalars().first()


async def geocode_missing(records: list[dict[str, Any]], geocoder: PostcodeGeocoder) -> int:
    needing = [
        record
        for record in records
        if _text(record, "postcode") and (_coordinate(record.get("lat")) is None or _coordinate(record.get("lng")) is None)
    ]
    if not needing:
        return 0
    found = await geocoder.bulk_lookup(_text(record, "postcode") for record in needing)
    resolved = 0
    for record in needing:
        coordinates = found.get(_text(record, "postcode"))
        if coordinates is None:
            logger.warning("import_geocode_missed", extra={"place_name": record.get("name"), "postcode": record.get("postcode")})
            continue
        record["lat"], record["lng"] = coordinates.lat, coordinates.lng
        resolved += 1
    return resolved


async def import_records(
    session: AsyncSession,
    records: Iterable[dict[str, Any]],
    *,
    geocoder: PostcodeGeocoder | None = None,
    dry_run: bool = False,
) -> ImportReport:
    records = list(records)
    report = ImportReport(dry_run=dry_run)
    if geocoder is not None:
        await geocode_missing(records, geocoder)

    seen_in_file: set[tuple[str, str]] = set()
    # Header is line 1, so data rows start at 2.
    for row_number, record in enumerate(records, start=2):
        name = _text(record, "name")
        address = _text(record, "address")
        type_name = _text(record, "type_name")
        lat, lng = _coordinate(record.get("lat")), _coordinate(record.get("lng"))
        postcode = format_uk_postcode(_text(record, "postcode"))

        if not name or not address or not type_name:
            report.skip(row_number, name, "missing name, address or type_name")
            continue
        if lat is None or lng is None:
            report.skip(row_number, name, "missing coordinates")
            continue
        file_key = (name.lower(), (postcode or address).lower())
        if file_key in seen_in_file or await find_existing(session, name, postcode, address) is not None:
            report.skip(row_number, name, "duplicate of an existing place")
            continue
        seen_in_file.add(file_key)

        fields: dict[str, Any] = {key: _text(record, key) for key in COPIED_FIELDS}
        fields.update(lat=lat, lng=lng, address_postcode=postcode)
        if _text(record, "specialties"):
            fields["specialties_text"] = _text(record, "specialties")
        hours = day_columns(record) or None
        if hours is None and _text(record, "opening_hours"):
            fields["opening_hours_text"] = _text(record, "opening_hours")

        try:
            if dry_run:
                clean_fields(fields)
                if await find_place_type(session, type_name) is None and type_name not in report.created_types:
                    report.created_types.append(type_name)
                report.created.append(name)
                continue

            place_type, created_type = await get_or_create_place_type(session, type_name)
            fields["type_id"] = place_type.id
            place = await create_place(session, fields, hours=hours, commit=False)
            for link in sales_links(record):
                place.online_sales_links.append(OnlineSalesLink(**link))
            await session.commit()
            if created_type:
                report.created_types.append(place_type.name)
        except HTTPException as exc:
            await session.rollback()
            report.fail(row_number, name, str(exc.detail))
            continue
        report.created.append(name)

    logger.info(
        "import_finished",
        extra={
            "dry_run": dry_run,
            "created_count": len(report.created),
            "skipped_count": len(report.skipped),
            "failed_count": len(report.failed),
        },
    )
    return report
