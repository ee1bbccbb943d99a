"""
RatingAggregator — pure arithmetic over a cafe's reviews.
No DB calls. Callers fetch the reviews and persist the result.

Two entry points:
  recompute_average    — write path, folds one new review into the cafe average
  compute_all_averages — read path, per-dimension averages from the full review set
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Protocol, Sequence

# Sub-rating dimensions, in display order
DIMENSIONS: tuple[str, ...] = ("overall", "location", "price", "coffee", "bakery")


class RatedReview(Protocol):
    """Anything carrying the five ratings, e.g. the Review ORM model."""

    overall_rating: float
    location_rating: float
    price_rating: float
    coffee_rating: float
    bakery_rating: float


class HasOverallRating(Protocol):
    overall_rating: float


@dataclass(frozen=True)
class RatingAverages:
    """Per-dimension averages for one cafe. All zero when there are no reviews."""

    overall: float = 0.0
    location: float = 0.0
    price: float = 0.0
    coffee: float = 0.0
    bakery: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with .5 going toward +infinity.
    round_half_up(4.5) == 5, round_half_up(0.5) == 1, round_half_up(-0.5) == 0.
    The built-in round() rounds half to even and would give 4 for 4.5.
    """
    # floor(value + 0.5) would round 0.49999999999999994 up through float error
    whole = math.floor(value)
    return int(whole) + (1 if value - whole >= 0.5 else 0)


def recompute_average(
    existing_reviews: Sequence[HasOverallRating],
    new_review: HasOverallRating,
) -> float:
    """
    Return the cafe average after adding new_review to existing_reviews.

    existing_reviews must be the reviews stored BEFORE the insert; their
    overall_rating values are already integers. The new review's rating is
    rounded half-up before it is folded in. The result itself is not rounded.
    """
    total = sum(r.overall_rating for r in existing_reviews)
    total += round_half_up(new_review.overall_rating)
    return total / (len(existing_reviews) + 1)


def compute_all_averages(reviews: Sequence[RatedReview]) -> RatingAverages:
    """Average every dimension over reviews; never divides by zero."""
    if not reviews:
        return RatingAverages()

    count = len(reviews)
    sums = {
        dim: sum(getattr(r, f"{dim}_rating") for r in reviews)
        for dim in DIMENSIONS
    }
    return RatingAverages(**{dim: total / count for dim, total in sums.items()})
