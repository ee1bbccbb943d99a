"""Pydantic schemas for registration, login and the current user."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class Credentials(BaseModel):
    """Body for POST /auth/register and POST /auth/login."""

    email: str = Field(..., max_length=320, pattern=_EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, value: str) -> str:
        return value.strip().lower()


class UserRead(BaseModel):
    """Public view of an account — never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
