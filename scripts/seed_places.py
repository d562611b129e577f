#!/usr/bin/env python
"""Seed place types, the specialty tree and a handful of sample shops."""
from __future__ import annotations

import argparse
import asyncio

from antiques_trail.db.session import SessionLocal, create_all, engine
from antiques_trail.domain.seed import seed


async def main(with_places: bool) -> None:
    await create_all()
    async with SessionLocal() as session:
        counts = await seed(session, with_places=with_places)
    await engine.dispose()
    print(
        f"Seeded {counts['place_types']} place types, "
        f"{counts['specialties']} specialties, {counts['places']} places"
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--no-places", action="store_true", help="only seed types and specialties")
    args = parser.parse_args()
    asyncio.run(main(not args.no_places))
