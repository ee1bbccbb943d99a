"""
seed.py — load demo cafes.

Without --csv, upserts three built-in demo cafes. With --csv, reads cafes
from a CSV with columns: name, address, description, amenities
(amenities comma-separated inside the cell; description/amenities optional).

Existing cafes are matched by name and left untouched. New cafes start with
no reviews and an average_rating of 0.

Usage:
    python scripts/seed.py
    python scripts/seed.py --csv data/cafes.csv
    python scripts/seed.py --csv data/cafes.csv --dry-run   # parse, no DB writes
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from sqlalchemy import func, select

from cafe_api.database import AsyncSessionLocal, engine
from cafe_api.models import Base, Cafe
from cafe_api.services.seed_service import DEMO_CAFES, load_csv, upsert_cafes

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the cafe database.")
    parser.add_argument("--csv", help="CSV file of cafes to load instead of the demo set")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, no DB writes")
    args = parser.parse_args()

    cafes = load_csv(args.csv) if args.csv else DEMO_CAFES
    logger.info("Parsed %d cafes", len(cafes))

    if args.dry_run:
        for cafe in cafes:
            logger.info("  %s, %s", cafe["name"], cafe["address"])
        return

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with AsyncSessionLocal() as session:
            inserted = await upsert_cafes(session, cafes)
            total = (await session.execute(select(func.count(Cafe.id)))).scalar()
        logger.info("Seeding finished: %d inserted, %d cafes in DB.", inserted, total)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
