"""
Demo and CSV cafe seeding.

Seeded cafes never carry an average: average_rating is a cache of the
cafe's reviews, so every seeded cafe starts at 0.0 with no reviews.
"""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_api.models import Cafe
from cafe_api.services.cafe_service import parse_amenities

logger = logging.getLogger(__name__)

DEMO_CAFES: list[dict] = [
    {
        "name": "The Cozy Corner",
        "address": "123 Main St, Anytown",
        "description": "A warm and inviting cafe with great coffee and pastries.",
        "amenities": ["wifi", "desserts"],
    },
    {
        "name": "Urban Brew",
        "address": "456 Oak Ave, Cityville",
        "description": "Modern cafe with specialty coffee and a vibrant atmosphere.",
        "amenities": ["specialty_coffee", "power_outlets", "good_for_working"],
    },
    {
        "name": "Bean There, Done That",
        "address": "789 Pine Ln, Townsville",
        "description": "Quirky cafe known for its unique blends and friendly staff.",
        "amenities": ["patio", "pet_friendly"],
    },
]


# ── CSV parsing ──────────────────────────────────────────────────────────────


def _clean_text(val: object) -> Optional[str]:
    if pd.isna(val) or not str(val).strip():
        return None
    return str(val).strip()


def load_csv(path: str) -> list[dict]:
    """
    Parse a CSV with columns name, address, description, amenities into cafe dicts.
    Rows without name or address are skipped; any other column is ignored.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    missing = {"name", "address"} - set(df.columns)
    if missing:
        raise ValueError(f"CSV is missing required columns: {', '.join(sorted(missing))}")

    cafes: list[dict] = []
    for idx, row in df.iterrows():
        name = _clean_text(row.get("name"))
        address = _clean_text(row.get("address"))
        if not name or not address:
            logger.warning("Row %d skipped: name and address are required", idx)
            continue
        try:
            amenities = parse_amenities(_clean_text(row.get("amenities")))
        except ValueError as exc:
            logger.warning("Row %d (%s): %s, amenities dropped", idx, name, exc)
            amenities = []
        cafes.append(
            {
                "name": name,
                "address": address,
                "description": _clean_text(row.get("description")),
                "amenities": amenities,
            }
        )
    return cafes


# ── DB writes ────────────────────────────────────────────────────────────────


async def upsert_cafes(db: AsyncSession, cafes: list[dict]) -> int:
    """Insert cafes whose names are not present yet. Returns the number inserted."""
    existing = set((await db.execute(select(Cafe.name))).scalars().all())

    inserted = 0
    try:
        for data in cafes:
            if data["name"] in existing:
                logger.info("Cafe exists, skipping: %s", data["name"])
                continue
            db.add(
                Cafe(
                    name=data["name"],
                    address=data["address"],
                    description=data.get("description"),
                    amenities=list(data.get("amenities") or []),
                    average_rating=0.0,
                )
            )
            existing.add(data["name"])
            inserted += 1
            logger.info("Created cafe: %s", data["name"])
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return inserted
