"""
FastAPI router for standalone media uploads.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from auth import dependencies as auth_dependencies
from core.errors import UpstreamStoreFailure
from core.media import MediaStore, MediaStoreError, get_media_store
from projects import images

from . import service

router = APIRouter(prefix="/api/uploads")


@router.post("")
async def upload_file(
    file: UploadFile = File(...),
    _: dict = Depends(auth_dependencies.require_admin),
    media: MediaStore = Depends(get_media_store),
) -> dict:
    """
    Upload one image to the media store and return its descriptor.
    """
    if not service.has_file(file):
        raise HTTPException(status_code=400, detail="No file uploaded")

    payload = await service.store_upload(file, media=media)
    return {
        "success": True,
        "message": "File uploaded successfully",
        "file": images.resolve_image(payload),
    }


@router.delete("/{public_id:path}")
async def delete_file(
    public_id: str,
    _: dict = Depends(auth_dependencies.require_admin),
    media: MediaStore = Depends(get_media_store),
) -> dict:
    """
    Delete one media-store asset by public id (folders included, e.g. "portfolio/abc").
    """
    try:
        deleted = await media.delete(public_id)
    except MediaStoreError as exc:
        raise UpstreamStoreFailure("Error deleting file", status_code=502) from exc

    if not deleted:
        raise HTTPException(status_code=404, detail="File not found")
    return {"success": True, "message": "File deleted successfully"}
