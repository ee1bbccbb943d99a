"""Pydantic schemas for review submission and display."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cafe_api.services.rating_aggregator import round_half_up

TEXT_MIN_LENGTH = 10
TEXT_MAX_LENGTH = 500


class ReviewCreate(BaseModel):
    """
    Validated review input, built from the submitted form.
    overall_rating is required and must be above 0; sub-ratings default to 0.
    Values may be fractional here; rounded() produces what gets stored.
    """

    text: str = Field(..., min_length=TEXT_MIN_LENGTH, max_length=TEXT_MAX_LENGTH)
    overall_rating: float = Field(..., gt=0, le=5)
    location_rating: float = Field(0, ge=0, le=5)
    price_rating: float = Field(0, ge=0, le=5)
    coffee_rating: float = Field(0, ge=0, le=5)
    bakery_rating: float = Field(0, ge=0, le=5)

    def rounded(self) -> dict[str, int]:
        """Integer ratings, rounded half-up, keyed by column name."""
        return {
            "overall_rating": round_half_up(self.overall_rating),
            "location_rating": round_half_up(self.location_rating),
            "price_rating": round_half_up(self.price_rating),
            "coffee_rating": round_half_up(self.coffee_rating),
            "bakery_rating": round_half_up(self.bakery_rating),
        }


class ReviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cafe_id: int
    user_id: int
    user_email: Optional[str] = None
    text: str
    overall_rating: int
    location_rating: int
    price_rating: int
    coffee_rating: int
    bakery_rating: int
    created_at: Optional[datetime] = None


class ReviewSubmitted(BaseModel):
    """Response for POST /cafes/{id}/reviews."""

    review: ReviewRead
    average_rating: float
