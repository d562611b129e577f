#!/usr/bin/env python
"""List duplicate places, merge one pair, or auto-merge exact duplicates."""
from __future__ import annotations

import argparse
import asyncio
import json

from antiques_trail.db.session import SessionLocal, engine
from antiques_trail.domain.duplicates.service import (
    auto_merge,
    describe,
    find_exact_duplicates,
    find_similar_names,
    merge_places,
)


async def list_duplicates(max_distance: int) -> None:
    async with SessionLocal() as session:
        exact = await find_exact_duplicates(session)
        similar = await find_similar_names(session, max_distance)
    print(f"Exact duplicates: {len(exact)} group(s)")
    for group in exact:
        print(json.dumps([describe(place) for place in group], ensure_ascii=False))
    print(f"Similar names: {len(similar)} pair(s)")
    for pair in similar:
        reason = "contains" if pair.contained else f"distance {pair.distance}"
        print(f"  [{reason}] #{pair.first.id} {pair.first.name!r} ~ #{pair.second.id} {pair.second.name!r}")


async def merge(keep_id: int, remove_id: int) -> None:
    async with SessionLocal() as session:
        place = await merge_places(session, keep_id, remove_id)
    print(f"Merged #{remove_id} into #{place.id} {place.name!r}")


async def auto(dry_run: bool) -> None:
    async with SessionLocal() as session:
        report = await auto_merge(session, dry_run=dry_run)
    print(json.dumps(report.as_dict(), indent=2, ensure_ascii=False))


async def main(args: argparse.Namespace) -> None:
    if args.command == "merge":
        await merge(args.keep, args.remove)
    elif args.command == "auto":
        await auto(args.dry_run)
    else:
        await list_duplicates(args.max_distance)
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    subparsers = parser.add_subparsers(dest="command")
    list_parser = subparsers.add_parser("list")
    list_parser.add_argument("--max-distance", type=int, default=3)
    merge_parser = subparsers.add_parser("merge")
    merge_parser.add_argument("keep", type=int)
    merge_parser.add_argument("remove", type=int)
    auto_parser = subparsers.add_parser("auto")
    auto_parser.add_argument("--dry-run", action="store_true")
    parser.set_defaults(command="list", max_distance=3)
    asyncio.run(main(parser.parse_args()))
