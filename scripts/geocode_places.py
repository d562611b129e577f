#!/usr/bin/env python
"""Refresh coordinates from postcodes.io for places that have a postcode."""
from __future__ import annotations

import argparse
import asyncio

from sqlalchemy import select

from antiques_trail.db.models.place import Place
from antiques_trail.db.session import SessionLocal, engine
from antiques_trail.domain.geocoding import PostcodeGeocoder
from antiques_trail.domain.places.validation import within_edinburgh


async def main(only_outside: bool, dry_run: bool) -> None:
    async with SessionLocal() as session:
        result = await session.execute(select(Place).where(Place.address_postcode.is_not(None)).order_by(Place.id))
        places = [
            place
            for place in result.scalars().all()
            if not only_outside or not within_edinburgh(place.lat, place.lng)
        ]
        async with PostcodeGeocoder() as geocoder:
            found = await geocoder.bulk_lookup(place.address_postcode for place in places)

        updated = 0
        for place in places:
            coordinates = found.get(place.address_postcode.strip())
            if coordinates is None:
                print(f"  ! {place.name}: no result for {place.address_postcode}")
                continue
            if (place.lat, place.lng) != (coordinates.lat, coordinates.lng):
                print(f"  {place.name}: ({place.lat}, {place.lng}) -> ({coordinates.lat}, {coordinates.lng})")
                place.lat, place.lng = coordinates.lat, coordinates.lng
                updated += 1
        if dry_run:
            await session.rollback()
        else:
            await session.commit()
    await engine.dispose()
    print(f"{'Would update' if dry_run else 'Updated'} {updated} of {len(places)} places")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--outside-only", action="store_true", help="only places outside the Edinburgh bounding box")
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()
    asyncio.run(main(args.outside_only, args.dry_run))
