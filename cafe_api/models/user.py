"""User ORM model — account credentials and ownership of cafes, reviews and photos."""

from sqlalchemy import Column, Integer, Text, TIMESTAMP, func
from sqlalchemy.orm import relationship

from cafe_api.database import Base


class User(Base):
    """A registered account. Passwords are only ever stored as salted hashes."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    cafes = relationship("Cafe", back_populates="creator")
    reviews = relationship("Review", back_populates="user")
    photos = relationship("Photo", back_populates="user")
