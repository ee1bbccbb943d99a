"""Account registration and credential checks."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_api.exceptions import EmailTakenError, InvalidCredentialsError, UserNotFoundError
from cafe_api.models import User
from cafe_api.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


async def register_user(db: AsyncSession, email: str, password: str) -> User:
    """Create an account. Raises EmailTakenError if the email is registered."""
    existing = await db.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise EmailTakenError(email)

    user = User(email=email, password_hash=hash_password(password))
    try:
        db.add(user)
        await db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise EmailTakenError(email) from exc
    except Exception:
        await db.rollback()
        raise

    logger.info("Registered user %s", user.id)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Return the user for valid credentials, else raise InvalidCredentialsError."""
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        raise InvalidCredentialsError()
    return user


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user
