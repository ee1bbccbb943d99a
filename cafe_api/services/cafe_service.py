"""
Cafe persistence — listing, detail, create/update/delete and amenity parsing.
Routers translate the domain exceptions raised here into HTTP responses.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cafe_api.exceptions import CafeNotFoundError, DuplicateCafeError, ForbiddenError
from cafe_api.models import Cafe, Photo, Review
from cafe_api.schemas.cafe import CafeDetail, CafeRead, PhotoRead, RatingBreakdown
from cafe_api.services.rating_aggregator import compute_all_averages
from cafe_api.services.review_service import forget_cafe_lock, serialize_review

logger = logging.getLogger(__name__)

KNOWN_AMENITIES: tuple[str, ...] = (
    "wifi",
    "specialty_coffee",
    "patio",
    "power_outlets",
    "good_for_working",
    "pet_friendly",
    "desserts",
)


def parse_amenities(raw: Optional[str]) -> list[str]:
    """
    Parse the comma-separated amenities form field.
    Blank entries are dropped and duplicates removed, keeping first-seen order.
    Raises ValueError naming any tag outside KNOWN_AMENITIES.
    """
    if not raw:
        return []
    tags = [t.strip().lower() for t in raw.split(",") if t.strip()]
    unknown = sorted({t for t in tags if t not in KNOWN_AMENITIES})
    if unknown:
        raise ValueError(f"Unknown amenities: {', '.join(unknown)}")
    return list(dict.fromkeys(tags))


def _with_children():
    return (
        selectinload(Cafe.reviews).selectinload(Review.user),
        selectinload(Cafe.photos),
    )


def serialize_cafe(cafe: Cafe) -> CafeRead:
    return CafeRead(
        id=cafe.id,
        name=cafe.name,
        address=cafe.address,
        description=cafe.description,
        amenities=list(cafe.amenities or []),
        average_rating=cafe.average_rating or 0.0,
        user_id=cafe.user_id,
        created_at=cafe.created_at,
        updated_at=cafe.updated_at,
        reviews=[serialize_review(r) for r in cafe.reviews],
        photos=[PhotoRead.model_validate(p) for p in cafe.photos],
    )


def serialize_cafe_detail(cafe: Cafe) -> CafeDetail:
    """CafeRead plus the per-dimension breakdown computed from cafe.reviews."""
    averages = compute_all_averages(cafe.reviews)
    return CafeDetail(
        **serialize_cafe(cafe).model_dump(),
        ratings=RatingBreakdown(**averages.as_dict(), review_count=len(cafe.reviews)),
    )


async def list_cafes(db: AsyncSession) -> list[Cafe]:
    result = await db.execute(select(Cafe).options(*_with_children()).order_by(Cafe.id))
    return list(result.scalars().all())


async def get_cafe(db: AsyncSession, cafe_id: int) -> Cafe:
    """Return the cafe with reviews (and authors) and photos loaded."""
    result = await db.execute(
        select(Cafe)
        .where(Cafe.id == cafe_id)
        .options(*_with_children())
        .execution_options(populate_existing=True)
    )
    cafe = result.scalar_one_or_none()
    if cafe is None:
        raise CafeNotFoundError(cafe_id)
    return cafe


async def create_cafe(
    db: AsyncSession,
    user_id: int,
    name: str,
    address: str,
    description: Optional[str],
    amenities: list[str],
    photo_url: str,
) -> Cafe:
    """Create a cafe and its first photo in one transaction."""
    cafe = Cafe(
        name=name,
        address=address,
        description=description,
        amenities=amenities,
        average_rating=0.0,
        user_id=user_id,
    )
    try:
        db.add(cafe)
        await db.flush()
        db.add(Photo(url=photo_url, cafe_id=cafe.id, user_id=user_id))
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.info("Rejected duplicate cafe name %r: %s", name, exc.orig)
        raise DuplicateCafeError(name) from exc
    except Exception:
        await db.rollback()
        raise

    logger.info("Cafe %s (%s) created by user %s", cafe.id, name, user_id)
    return await get_cafe(db, cafe.id)


async def update_cafe(
    db: AsyncSession,
    cafe_id: int,
    user_id: int,
    name: str,
    address: str,
    description: Optional[str],
    amenities: list[str],
    photo_url: Optional[str] = None,
) -> Cafe:
    """Replace the editable fields of a cafe. Only its creator may do this."""
    cafe = await get_cafe(db, cafe_id)
    if cafe.user_id != user_id:
        raise ForbiddenError(cafe_id)

    cafe.name = name
    cafe.address = address
    cafe.description = description
    cafe.amenities = amenities
    if photo_url:
        db.add(Photo(url=photo_url, cafe_id=cafe_id, user_id=user_id))

    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise DuplicateCafeError(name) from exc
    except Exception:
        await db.rollback()
        raise

    logger.info("Cafe %s updated by user %s", cafe_id, user_id)
    return await get_cafe(db, cafe_id)


async def delete_cafe(db: AsyncSession, cafe_id: int, user_id: int) -> None:
    """Delete a cafe with its reviews and photos. Only its creator may do this."""
    cafe = await get_cafe(db, cafe_id)
    if cafe.user_id != user_id:
        raise ForbiddenError(cafe_id)

    try:
        await db.delete(cafe)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    forget_cafe_lock(cafe_id)
    logger.info("Cafe %s deleted by user %s", cafe_id, user_id)


async def add_photo(
    db: AsyncSession,
    cafe_id: int,
    user_id: int,
    url: str,
) -> Photo:
    """Attach an image URL to an existing cafe."""
    exists = await db.execute(select(Cafe.id).where(Cafe.id == cafe_id))
    if exists.scalar_one_or_none() is None:
        raise CafeNotFoundError(cafe_id)

    photo = Photo(url=url, cafe_id=cafe_id, user_id=user_id)
    try:
        db.add(photo)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(photo)
    return photo
