#!/usr/bin/env python
"""Create the schema, or drop and recreate it with --reset."""
from __future__ import annotations

import argparse
import asyncio

from antiques_trail.core.config import settings
from antiques_trail.db.session import create_all, drop_all, engine


async def main(reset: bool) -> None:
    if reset:
        await drop_all()
        print(f"Dropped all tables in {settings.database_url}")
    await create_all()
    await engine.dispose()
    print(f"Schema ready in {settings.database_url}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="drop every table first")
    args = parser.parse_args()
    asyncio.run(main(args.reset))
