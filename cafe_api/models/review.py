"""Review ORM model — free text plus five integer ratings in [0, 5]."""

from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, func
from sqlalchemy.orm import relationship

from cafe_api.database import Base


class Review(Base):
    """
    A user review for a cafe. Immutable once created: there is no edit or
    delete path other than deleting the whole cafe.
    All ratings are rounded half-up to integers before they are stored.
    """

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cafe_id = Column(
        Integer,
        ForeignKey("cafes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    text = Column(Text, nullable=False)

    overall_rating = Column(Integer, nullable=False)
    location_rating = Column(Integer, nullable=False, server_default="0")
    price_rating = Column(Integer, nullable=False, server_default="0")
    coffee_rating = Column(Integer, nullable=False, server_default="0")
    bakery_rating = Column(Integer, nullable=False, server_default="0")

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    cafe = relationship("Cafe", back_populates="reviews")
    user = relationship("User", back_populates="reviews")
