"""
create_tables.py — idempotent table creation script.
The API also creates missing tables at startup; run this to prepare a
database ahead of the first deploy, or after adding a model.
Reports which tables were created and which already existed.

Usage:
    python scripts/create_tables.py
"""

from __future__ import annotations

import asyncio

from sqlalchemy import inspect

from cafe_api.database import engine
from cafe_api.models import Base


def _create_missing(sync_conn) -> tuple[list[str], list[str]]:
    """Run create_all and return (created, already_present) table names."""
    before = set(inspect(sync_conn).get_table_names())
    Base.metadata.create_all(sync_conn)
    expected = sorted(Base.metadata.tables)
    created = [name for name in expected if name not in before]
    present = [name for name in expected if name in before]
    return created, present


async def main() -> None:
    print(f"Target: {engine.url.render_as_string(hide_password=True)}")
    async with engine.begin() as conn:
        created, present = await conn.run_sync(_create_missing)

    for name in created:
        print(f"  + {name}")
    for name in present:
        print(f"  = {name} (exists)")
    print(f"\n{len(created)} created, {len(present)} already present.")

    if created:
        print("Run `python scripts/seed.py` next to load demo cafes.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
