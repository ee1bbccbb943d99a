"""
Review endpoints — list a cafe's reviews and submit a new one.

Validation (text length, rating ranges) happens here, before the rating
aggregator runs; the aggregator only ever sees validated ratings.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, status
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_api.auth import require_user
from cafe_api.database import get_db
from cafe_api.schemas.review import (
    TEXT_MAX_LENGTH,
    TEXT_MIN_LENGTH,
    ReviewCreate,
    ReviewRead,
    ReviewSubmitted,
)
from cafe_api.services.review_service import list_reviews, serialize_review, submit_review

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cafes/{cafe_id}/reviews", tags=["reviews"])


@router.get("", response_model=list[ReviewRead])
async def get_reviews(
    cafe_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[ReviewRead]:
    """All reviews for a cafe, with author emails, oldest first."""
    reviews = await list_reviews(db, cafe_id)
    return [serialize_review(r) for r in reviews]


@router.post("", response_model=ReviewSubmitted, status_code=status.HTTP_201_CREATED)
async def create_review(
    cafe_id: int,
    text: str = Form(..., min_length=TEXT_MIN_LENGTH, max_length=TEXT_MAX_LENGTH),
    overall_rating: float = Form(..., gt=0, le=5),
    location_rating: float = Form(0, ge=0, le=5),
    price_rating: float = Form(0, ge=0, le=5),
    coffee_rating: float = Form(0, ge=0, le=5),
    bakery_rating: float = Form(0, ge=0, le=5),
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db),
) -> ReviewSubmitted:
    """
    Submit a review. Ratings are rounded half-up to integers before storage,
    and the cafe's average_rating is refreshed in the same transaction.
    """
    payload = ReviewCreate(
        text=text,
        overall_rating=overall_rating,
        location_rating=location_rating,
        price_rating=price_rating,
        coffee_rating=coffee_rating,
        bakery_rating=bakery_rating,
    )
    review, average = await submit_review(db, cafe_id, user_id, payload)
    return ReviewSubmitted(review=serialize_review(review), average_rating=average)
