"""SQLAlchemy ORM models package."""

from cafe_api.database import Base
from cafe_api.models.user import User
from cafe_api.models.cafe import Cafe
from cafe_api.models.review import Review
from cafe_api.models.photo import Photo

__all__ = ["Base", "User", "Cafe", "Review", "Photo"]
