"""
Domain exceptions with machine-readable error codes.
Registered on the app in main.py; every error renders as
{"detail": <message>, "code": <CODE>} plus "details" when present.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class CafeApiError(Exception):
    """Base class for every error the API raises on purpose."""

    def __init__(
        self,
        message: str,
        code: str = "CAFE_API_ERROR",
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            result["details"] = self.details
        return result


# ── Lookup ───────────────────────────────────────────────────────────────────


class CafeNotFoundError(CafeApiError):
    def __init__(self, cafe_id: int):
        super().__init__(
            message="Cafe not found",
            code="CAFE_NOT_FOUND",
            status_code=404,
            details={"cafe_id": cafe_id},
        )


class UserNotFoundError(CafeApiError):
    def __init__(self, user_id: int):
        super().__init__(
            message="User not found",
            code="USER_NOT_FOUND",
            status_code=404,
            details={"user_id": user_id},
        )


# ── Conflicts ────────────────────────────────────────────────────────────────


class DuplicateCafeError(CafeApiError):
    """Raised when a cafe name is already taken (names are unique)."""

    def __init__(self, name: str):
        super().__init__(
            message="A cafe with this name already exists.",
            code="DUPLICATE_CAFE",
            status_code=409,
            details={"name": name},
        )


class EmailTakenError(CafeApiError):
    def __init__(self, email: str):
        super().__init__(
            message="An account with this email already exists.",
            code="EMAIL_TAKEN",
            status_code=409,
            details={"email": email},
        )


# ── Auth ─────────────────────────────────────────────────────────────────────


class NotAuthenticatedError(CafeApiError):
    def __init__(self) -> None:
        super().__init__(
            message="Unauthorized",
            code="NOT_AUTHENTICATED",
            status_code=401,
        )


class InvalidCredentialsError(CafeApiError):
    def __init__(self) -> None:
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


class ForbiddenError(CafeApiError):
    """Raised when a logged-in user touches a cafe they did not create."""

    def __init__(self, cafe_id: int):
        super().__init__(
            message="Only the creator of this cafe can change it",
            code="FORBIDDEN",
            status_code=403,
            details={"cafe_id": cafe_id},
        )


# ── Uploads ──────────────────────────────────────────────────────────────────


class InvalidFileTypeError(CafeApiError):
    def __init__(self, filename: str, content_type: Optional[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            details={"filename": filename, "content_type": content_type},
        )


class FileTooLargeError(CafeApiError):
    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(
            message=f"File too large: {size_bytes} bytes (max: {max_bytes})",
            code="FILE_TOO_LARGE",
            status_code=413,
            details={"size_bytes": size_bytes, "max_bytes": max_bytes},
        )


# ── Handler ──────────────────────────────────────────────────────────────────


async def cafe_api_exception_handler(request: Request, exc: CafeApiError) -> JSONResponse:
    """Convert a CafeApiError to its JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )
