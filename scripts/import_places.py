#!/usr/bin/env python
"""Import places from a CSV or JSON file."""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from antiques_trail.db.session import SessionLocal, create_all, engine
from antiques_trail.domain.geocoding import PostcodeGeocoder
from antiques_trail.domain.importer.service import import_records, read_records


async def main(path: Path, geocode: bool, dry_run: bool) -> None:
    records = read_records(path)
    print(f"Read {len(records)} records from {path}")
    await create_all()
    async with SessionLocal() as session:
        if geocode:
            async with PostcodeGeocoder() as geocoder:
                report = await import_records(session, records, geocoder=geocoder, dry_run=dry_run)
        else:
            report = await import_records(session, records, dry_run=dry_run)
    await engine.dispose()
    print(json.dumps(report.as_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", type=Path)
    parser.add_argument("--no-geocode", action="store_true", help="skip rows without lat/lng instead of geocoding")
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()
    asyncio.run(main(args.path, not args.no_geocode, args.dry_run))
