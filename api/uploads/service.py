"""
Upload intake.

Runs before any project handler sees the request:
- Validate the incoming image (extension + content type)
- Read file bytes with a size limit
- Push the bytes to the media store and hand back its payload
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import HTTPException, UploadFile

from core.errors import UpstreamStoreFailure
from core.media import MediaStore, MediaStoreError
from core.settings import get_settings

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}

logger = logging.getLogger(__name__)


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def has_file(file: UploadFile | None) -> bool:
    """
    Browsers send an empty, nameless part for an untouched file input.
    """
    return file is not None and bool(file.filename)


def validate_upload(file: UploadFile) -> str:
    """
    Return the normalized file extension if this upload is an accepted image.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="Missing filename.")

    ext = _file_ext(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: {sorted(ALLOWED_EXTENSIONS)}",
        )

    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Only JPEG, PNG, WebP and GIF images are allowed.",
        )

    return ext


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Max is {max_bytes} bytes.",
            )

    if not buf:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")
    return bytes(buf)


async def store_upload(file: UploadFile, *, media: MediaStore) -> dict[str, Any]:
    """
    Validate, read and upload one image; returns the media store's payload.
    """
    validate_upload(file)
    data = await read_upload_bytes(file, max_bytes=get_settings().max_upload_bytes)

    try:
        payload = await media.upload(
            data,
            filename=file.filename or "upload",
            content_type=file.content_type,
        )
    except MediaStoreError as exc:
        logger.exception("upload_failed filename=%s size_bytes=%s", file.filename, len(data))
        raise UpstreamStoreFailure("Error uploading file", status_code=502) from exc

    logger.info("upload_stored public_id=%s size_bytes=%s", payload.get("public_id"), len(data))
    return payload
