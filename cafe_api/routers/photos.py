"""Photo endpoint — attach an already-hosted image URL to a cafe."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_api.auth import require_user
from cafe_api.database import get_db
from cafe_api.schemas.cafe import PhotoCreate, PhotoRead
from cafe_api.services.cafe_service import add_photo

router = APIRouter(prefix="/cafes/{cafe_id}/photos", tags=["photos"])


@router.post("", response_model=PhotoRead, status_code=status.HTTP_201_CREATED)
async def create_photo(
    cafe_id: int,
    body: PhotoCreate,
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db),
) -> PhotoRead:
    photo = await add_photo(db, cafe_id, user_id, body.url)
    return PhotoRead.model_validate(photo)
