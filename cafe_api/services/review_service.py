"""
Review submission — inserts a review and refreshes the cafe's cached average.

The read-modify-write of Cafe.average_rating is serialised per cafe:
  1. an in-process asyncio.Lock keyed by cafe id (writers in this worker)
  2. SELECT ... FOR UPDATE on the cafe row (writers in other workers;
     a no-op on SQLite, which serialises writers on its own)
The existing reviews are read inside the same transaction as the insert,
so two concurrent submissions can never both miss each other's rating.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cafe_api.exceptions import CafeNotFoundError
from cafe_api.models import Cafe, Review
from cafe_api.schemas.review import ReviewCreate, ReviewRead
from cafe_api.services.rating_aggregator import recompute_average

logger = logging.getLogger(__name__)

_cafe_locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)


def cafe_lock(cafe_id: int) -> asyncio.Lock:
    """Return the lock guarding cafe_id's average within this process."""
    return _cafe_locks[cafe_id]


def forget_cafe_lock(cafe_id: int) -> None:
    """Drop the lock for a deleted cafe. Holders keep their reference until they release it."""
    _cafe_locks.pop(cafe_id, None)


def serialize_review(review: Review) -> ReviewRead:
    """ReviewRead for review, with the author's email when the user row is loaded."""
    result = ReviewRead.model_validate(review)
    user = review.__dict__.get("user")
    if user is not None:
        result = result.model_copy(update={"user_email": user.email})
    return result


async def submit_review(
    db: AsyncSession,
    cafe_id: int,
    user_id: int,
    payload: ReviewCreate,
) -> tuple[Review, float]:
    """
    Store a new review for cafe_id and return it with the cafe's new average.
    Raises CafeNotFoundError if the cafe does not exist. Storage errors roll
    back the transaction and propagate unchanged.
    """
    async with cafe_lock(cafe_id):
        try:
            result = await db.execute(
                select(Cafe).where(Cafe.id == cafe_id).with_for_update()
            )
            cafe = result.scalar_one_or_none()
            if cafe is None:
                raise CafeNotFoundError(cafe_id)

            existing = (
                await db.execute(select(Review).where(Review.cafe_id == cafe_id))
            ).scalars().all()

            review = Review(
                cafe_id=cafe_id,
                user_id=user_id,
                text=payload.text,
                **payload.rounded(),
            )
            new_average = recompute_average(existing, payload)

            db.add(review)
            cafe.average_rating = new_average
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    await db.refresh(review, attribute_names=["created_at", "user"])
    logger.info(
        "Review %s added to cafe %s by user %s (average %.3f over %d reviews)",
        review.id,
        cafe_id,
        user_id,
        new_average,
        len(existing) + 1,
    )
    return review, new_average


async def list_reviews(db: AsyncSession, cafe_id: int) -> list[Review]:
    """All reviews for cafe_id with their authors loaded, oldest first."""
    exists = await db.execute(select(Cafe.id).where(Cafe.id == cafe_id))
    if exists.scalar_one_or_none() is None:
        raise CafeNotFoundError(cafe_id)

    result = await db.execute(
        select(Review)
        .where(Review.cafe_id == cafe_id)
        .options(selectinload(Review.user))
        .order_by(Review.id)
    )
    return list(result.scalars().all())
