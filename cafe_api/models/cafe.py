"""Cafe ORM model with the denormalised average rating."""

from sqlalchemy import (
    Column, Integer, Text, JSON, Double,
    TIMESTAMP, ForeignKey, func,
)
from sqlalchemy.orm import relationship

from cafe_api.database import Base


class Cafe(Base):
    """
    A cafe listed by a user (or seeded).
    average_rating is a cache of the mean overall_rating of its reviews,
    maintained by the review submission path in the same transaction as
    each review insert. It is 0 when the cafe has no reviews.
    """

    __tablename__ = "cafes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    address = Column(Text, nullable=False)
    description = Column(Text, nullable=True)

    # Amenity tags, e.g. ["wifi", "patio"]
    amenities = Column(JSON, nullable=False, default=list)

    average_rating = Column(Double, nullable=False, default=0.0, server_default="0")

    # Seeded cafes have no creator
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    creator = relationship("User", back_populates="cafes")
    reviews = relationship(
        "Review",
        back_populates="cafe",
        cascade="all, delete-orphan",
        order_by="Review.id",
    )
    photos = relationship(
        "Photo",
        back_populates="cafe",
        cascade="all, delete-orphan",
        order_by="Photo.id",
    )
