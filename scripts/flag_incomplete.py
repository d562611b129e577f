#!/usr/bin/env python
"""Report incomplete places and clear placeholder phone numbers."""
from __future__ import annotations

import argparse
import asyncio
import json

from antiques_trail.db.session import SessionLocal, engine
from antiques_trail.domain.maintenance.places import flag_incomplete


async def main(dry_run: bool) -> None:
    async with SessionLocal() as session:
        report = await flag_incomplete(session, dry_run=dry_run)
    await engine.dispose()
    print(json.dumps(report.as_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()
    asyncio.run(main(args.dry_run))
