"""Pydantic schemas for cafes, their photos and rating breakdowns."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cafe_api.schemas.review import ReviewRead


class PhotoCreate(BaseModel):
    """Body for POST /cafes/{id}/photos — attach an already-hosted image."""

    url: str = Field(..., min_length=1, max_length=2048)


class PhotoRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    cafe_id: int
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None


class RatingBreakdown(BaseModel):
    """Per-dimension averages computed from the full review set on read."""

    overall: float = 0.0
    location: float = 0.0
    price: float = 0.0
    coffee: float = 0.0
    bakery: float = 0.0
    review_count: int = 0


class CafeRead(BaseModel):
    """A cafe as it appears in the listing."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    description: Optional[str] = None
    amenities: list[str] = Field(default_factory=list)
    average_rating: float = 0.0
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    reviews: list[ReviewRead] = Field(default_factory=list)
    photos: list[PhotoRead] = Field(default_factory=list)


class CafeDetail(CafeRead):
    """GET /cafes/{id} — adds the per-dimension rating breakdown."""

    ratings: RatingBreakdown = Field(default_factory=RatingBreakdown)
