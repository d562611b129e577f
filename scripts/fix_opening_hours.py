#!/usr/bin/env python
"""Repair opening hours data. Run without a command to verify only."""
from __future__ import annotations

import argparse
import asyncio
import json

from antiques_trail.db.session import SessionLocal, engine
from antiques_trail.domain.maintenance.hours import COMMANDS, verify_hours


async def main(commands: list[str], dry_run: bool) -> None:
    async with SessionLocal() as session:
        for name in commands:
            report = await COMMANDS[name](session, dry_run=dry_run)
            print(json.dumps(report.as_dict(), indent=2, ensure_ascii=False))
        report = await verify_hours(session)
        print(json.dumps(report.as_dict(), indent=2, ensure_ascii=False))
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("commands", nargs="*", help=f"repairs to run in order: {', '.join(COMMANDS)} or all")
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()
    unknown = sorted(set(args.commands) - set(COMMANDS) - {"all"})
    if unknown:
        parser.error(f"unknown command(s): {', '.join(unknown)}")
    selected = list(COMMANDS) if "all" in args.commands else args.commands
    asyncio.run(main(selected, args.dry_run))
