"""
Account endpoints — registration, cookie-session login/logout and the current user.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_api.auth import clear_session_cookie, require_user, set_session_cookie
from cafe_api.database import get_db
from cafe_api.schemas.user import Credentials, UserRead
from cafe_api.services.user_service import authenticate, get_user, register_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    body: Credentials,
    db: AsyncSession = Depends(get_db),
) -> UserRead:
    """Create an account. Does not log the user in."""
    user = await register_user(db, body.email, body.password)
    return UserRead.model_validate(user)


@router.post("/login", response_model=UserRead)
async def login(
    body: Credentials,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> UserRead:
    """Check credentials and start a cookie session."""
    user = await authenticate(db, body.email, body.password)
    set_session_cookie(response, user.id)
    logger.info("User %s logged in", user.id)
    return UserRead.model_validate(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout() -> Response:
    """End the session. Safe to call when not logged in."""
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response)
    return response


@router.get("/me", response_model=UserRead)
async def me(
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db),
) -> UserRead:
    """Return the logged-in user."""
    user = await get_user(db, user_id)
    return UserRead.model_validate(user)
