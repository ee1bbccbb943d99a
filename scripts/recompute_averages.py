"""
recompute_averages.py — rebuild every cafe's cached average_rating from its reviews.

Reviews written outside the API (manual SQL, restored backups) bypass the
write path; this brings the cache back in line with the reviews.
Each cafe row is locked FOR UPDATE while it is recomputed, as in review submission.

Usage:
    python scripts/recompute_averages.py
    python scripts/recompute_averages.py --dry-run   # report drift only
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from sqlalchemy import select

from cafe_api.database import AsyncSessionLocal, engine
from cafe_api.models import Cafe, Review
from cafe_api.services.rating_aggregator import compute_all_averages

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def recompute_all(dry_run: bool = False) -> int:
    """Return the number of cafes whose cached average changed (or would change)."""
    changed = 0
    async with AsyncSessionLocal() as session:
        cafe_ids = (await session.execute(select(Cafe.id).order_by(Cafe.id))).scalars().all()

        for cafe_id in cafe_ids:
            cafe = (
                await session.execute(
                    select(Cafe).where(Cafe.id == cafe_id).with_for_update()
                )
            ).scalar_one()
            reviews = (
                await session.execute(select(Review).where(Review.cafe_id == cafe_id))
            ).scalars().all()

            expected = compute_all_averages(reviews).overall
            if abs((cafe.average_rating or 0.0) - expected) > 1e-9:
                changed += 1
                logger.info(
                    "Cafe %s (%s): %.3f → %.3f over %d reviews",
                    cafe.id, cafe.name, cafe.average_rating or 0.0, expected, len(reviews),
                )
                if not dry_run:
                    cafe.average_rating = expected

            if dry_run:
                await session.rollback()
            else:
                await session.commit()

    return changed


async def main() -> None:
    parser = argparse.ArgumentParser(description="Rebuild cached cafe averages.")
    parser.add_argument("--dry-run", action="store_true", help="Report drift without writing")
    args = parser.parse_args()

    try:
        changed = await recompute_all(dry_run=args.dry_run)
        verb = "would change" if args.dry_run else "updated"
        logger.info("Done: %d cafes %s.", changed, verb)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
