"""
Session tokens and the request-scoped identity context.

The session is an HS256 JWT stored in an HttpOnly cookie. Handlers never read
the cookie themselves: they depend on get_request_context (anonymous allowed)
or require_user (401 for anonymous callers).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request, Response
from jose import ExpiredSignatureError, JWTError, jwt

from cafe_api.config import settings
from cafe_api.exceptions import NotAuthenticatedError

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller for the lifetime of one request."""

    user_id: Optional[int] = None

    def current_user_id(self) -> Optional[int]:
        return self.user_id

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


# ── Tokens ───────────────────────────────────────────────────────────────────


def create_session_token(user_id: int, now: Optional[datetime] = None) -> str:
    """Return a signed token identifying user_id, valid for SESSION_MAX_AGE_SECONDS."""
    issued = now or datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(seconds=settings.session_max_age_seconds)).timestamp()),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=_ALGORITHM)


def decode_session_token(token: str) -> Optional[int]:
    """Return the user id in token, or None if it is expired, forged or malformed."""
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[_ALGORITHM])
    except ExpiredSignatureError:
        logger.debug("Session token expired")
        return None
    except JWTError as exc:
        logger.warning("Rejected session token: %s", exc)
        return None

    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Session token has no usable subject")
        return None


def set_session_cookie(response: Response, user_id: int) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user_id),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name)


# ── Dependencies ─────────────────────────────────────────────────────────────


async def get_request_context(request: Request) -> RequestContext:
    """FastAPI dependency: build the caller's context from the session cookie."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return RequestContext()
    return RequestContext(user_id=decode_session_token(token))


async def require_user(
    context: RequestContext = Depends(get_request_context),
) -> int:
    """FastAPI dependency: return the caller's user id or fail with 401."""
    user_id = context.current_user_id()
    if user_id is None:
        raise NotAuthenticatedError()
    return user_id
