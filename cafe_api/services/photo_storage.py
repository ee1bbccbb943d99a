"""
Photo storage — writes uploaded images to UPLOAD_DIR, served at /uploads.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from pathlib import Path

from fastapi import UploadFile

from cafe_api.config import settings
from cafe_api.exceptions import FileTooLargeError, InvalidFileTypeError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_filename(original: str) -> str:
    """Strip any directory part and replace characters unsafe in URLs."""
    base = Path(original or "photo").name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "photo"


def upload_root() -> Path:
    return Path(settings.upload_dir)


async def save_upload(upload: UploadFile) -> str:
    """
    Persist an uploaded image and return its public URL.
    Raises InvalidFileTypeError for non-image content and FileTooLargeError
    above MAX_UPLOAD_BYTES.
    """
    filename = upload.filename or "photo"
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise InvalidFileTypeError(filename, upload.content_type)

    data = await upload.read()
    if len(data) > settings.max_upload_bytes:
        raise FileTooLargeError(len(data), settings.max_upload_bytes)

    stored_name = f"{int(time.time() * 1000)}-{_safe_filename(filename)}"
    target = upload_root() / stored_name

    def _write() -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    await asyncio.to_thread(_write)
    logger.info("Stored photo %s (%d bytes)", stored_name, len(data))
    return f"{PUBLIC_PREFIX}/{stored_name}"


async def discard_upload(url: str) -> None:
    """Remove a file previously returned by save_upload; unknown URLs are ignored."""
    if not url.startswith(f"{PUBLIC_PREFIX}/"):
        return
    target = upload_root() / Path(url).name
    await asyncio.to_thread(target.unlink, missing_ok=True)
    logger.info("Discarded photo %s", target.name)
