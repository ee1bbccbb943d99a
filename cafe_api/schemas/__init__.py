"""Pydantic schemas package."""

from cafe_api.schemas.user import Credentials, UserRead
from cafe_api.schemas.review import ReviewCreate, ReviewRead, ReviewSubmitted
from cafe_api.schemas.cafe import (
    CafeDetail,
    CafeRead,
    PhotoCreate,
    PhotoRead,
    RatingBreakdown,
)

__all__ = [
    "Credentials", "UserRead",
    "ReviewCreate", "ReviewRead", "ReviewSubmitted",
    "CafeDetail", "CafeRead", "PhotoCreate", "PhotoRead", "RatingBreakdown",
]
