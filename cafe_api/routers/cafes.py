"""
Cafe endpoints — listing, detail, and creator-only create/update/delete.

Create and update take multipart form data so a photo can travel with the
cafe fields; amenities arrive as a comma-separated string.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_api.auth import require_user
from cafe_api.database import get_db
from cafe_api.exceptions import CafeApiError
from cafe_api.schemas.cafe import CafeDetail, CafeRead
from cafe_api.services import cafe_service
from cafe_api.services.photo_storage import discard_upload, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cafes", tags=["cafes"])

NAME_MIN_LENGTH = 3
ADDRESS_MIN_LENGTH = 5


# ── Helpers ──────────────────────────────────────────────────────────────────


def _amenities_or_422(raw: Optional[str]) -> list[str]:
    try:
        return cafe_service.parse_amenities(raw)
    except ValueError as exc:
        raise HTTPException(
            status_code=422,
            detail=str(exc),
            headers={"X-Error-Code": "INVALID_AMENITIES"},
        )


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


# ── Endpoints ────────────────────────────────────────────────────────────────


@router.get("", response_model=list[CafeRead])
async def list_cafes(db: AsyncSession = Depends(get_db)) -> list[CafeRead]:
    """Every cafe with its reviews and photos."""
    cafes = await cafe_service.list_cafes(db)
    return [cafe_service.serialize_cafe(c) for c in cafes]


@router.post("", response_model=CafeDetail, status_code=status.HTTP_201_CREATED)
async def create_cafe(
    name: str = Form(..., min_length=NAME_MIN_LENGTH),
    address: str = Form(..., min_length=ADDRESS_MIN_LENGTH),
    description: Optional[str] = Form(None),
    amenities: Optional[str] = Form(None),
    photo: UploadFile = File(...),
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db),
) -> CafeDetail:
    """Create a cafe with its first photo. Names are unique (409 on clash)."""
    tags = _amenities_or_422(amenities)
    url = await save_upload(photo)
    try:
        cafe = await cafe_service.create_cafe(
            db,
            user_id=user_id,
            name=name.strip(),
            address=address.strip(),
            description=_blank_to_none(description),
            amenities=tags,
            photo_url=url,
        )
    except CafeApiError:
        await discard_upload(url)
        raise
    return cafe_service.serialize_cafe_detail(cafe)


@router.get("/{cafe_id}", response_model=CafeDetail)
async def get_cafe(cafe_id: int, db: AsyncSession = Depends(get_db)) -> CafeDetail:
    """
    Cafe detail: reviews with author emails, photos, the stored average_rating
    and a per-dimension ratings breakdown computed from the reviews.
    """
    cafe = await cafe_service.get_cafe(db, cafe_id)
    return cafe_service.serialize_cafe_detail(cafe)


@router.put("/{cafe_id}", response_model=CafeDetail)
async def update_cafe(
    cafe_id: int,
    name: str = Form(..., min_length=NAME_MIN_LENGTH),
    address: str = Form(..., min_length=ADDRESS_MIN_LENGTH),
    description: Optional[str] = Form(None),
    amenities: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db),
) -> CafeDetail:
    """Replace a cafe's fields; an optional photo is appended to its gallery."""
    tags = _amenities_or_422(amenities)
    url = await save_upload(photo) if photo is not None and photo.filename else None
    try:
        cafe = await cafe_service.update_cafe(
            db,
            cafe_id,
            user_id=user_id,
            name=name.strip(),
            address=address.strip(),
            description=_blank_to_none(description),
            amenities=tags,
            photo_url=url,
        )
    except CafeApiError:
        if url:
            await discard_upload(url)
        raise
    return cafe_service.serialize_cafe_detail(cafe)


@router.delete("/{cafe_id}")
async def delete_cafe(
    cafe_id: int,
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Delete a cafe together with its reviews and photos."""
    await cafe_service.delete_cafe(db, cafe_id, user_id)
    return {"message": "Cafe deleted"}
