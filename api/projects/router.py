"""
Project API endpoints.

Reads are public; create/update/delete need an admin token. Create and update
take multipart form data with an optional `image` file.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from auth import dependencies as auth_dependencies
from core.media import MediaStore, get_media_store
from uploads import service as upload_service

from . import service

router = APIRouter(prefix="/api/projects")


def _form_fields(**values: str | None) -> dict[str, Any]:
    # Only fields the client actually sent; absent ones stay untouched on update.
    return {name: value for name, value in values.items() if value is not None}


async def _intake(image: UploadFile | None, media: MediaStore) -> dict[str, Any] | None:
    if not upload_service.has_file(image):
        return None
    return await upload_service.store_upload(image, media=media)


@router.get("")
async def list_projects(
    featured: bool | None = Query(default=None),
    q: str = Query(default="", max_length=200),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> dict:
    projects = await service.list_projects(
        featured=featured,
        search_query=q,
        limit=limit,
        offset=offset,
    )
    return {
        "success": True,
        "projects": projects,
        "limit": limit,
        "offset": offset,
        "count": len(projects),
    }


@router.get("/featured")
async def featured_projects() -> dict:
    projects = await service.featured_projects()
    return {"success": True, "projects": projects, "count": len(projects)}


@router.get("/{project_id}")
async def get_project(project_id: int) -> dict:
    project = await service.get_project(project_id)
    return {"success": True, "project": project}


@router.post("", status_code=201)
async def create_project(
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    technologies: str | None = Form(default=None),
    github_url: str | None = Form(default=None),
    live_url: str | None = Form(default=None),
    featured: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    _: dict = Depends(auth_dependencies.require_admin),
    media: MediaStore = Depends(get_media_store),
) -> dict:
    """
    Create a project. The image is uploaded before the fields are validated;
    a validation failure deletes it again.
    """
    fields = _form_fields(
        title=title,
        description=description,
        technologies=technologies,
        github_url=github_url,
        live_url=live_url,
        featured=featured,
    )
    upload = await _intake(image, media)
    project = await service.create_project(fields, upload=upload, media=media)
    return {
        "success": True,
        "message": "Project created successfully",
        "project": project,
    }


@router.put("/{project_id}")
async def update_project(
    project_id: int,
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    technologies: str | None = Form(default=None),
    github_url: str | None = Form(default=None),
    live_url: str | None = Form(default=None),
    featured: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    _: dict = Depends(auth_dependencies.require_admin),
    media: MediaStore = Depends(get_media_store),
) -> dict:
    """
    Partially update a project; a new image replaces (and then deletes) the old one.
    """
    fields = _form_fields(
        title=title,
        description=description,
        technologies=technologies,
        github_url=github_url,
        live_url=live_url,
        featured=featured,
    )
    upload = await _intake(image, media)
    project = await service.update_project(project_id, fields, upload=upload, media=media)
    return {
        "success": True,
        "message": "Project updated successfully",
        "project": project,
    }


@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    _: dict = Depends(auth_dependencies.require_admin),
    media: MediaStore = Depends(get_media_store),
) -> dict:
    await service.delete_project(project_id, media=media)
    return {"success": True, "message": "Project deleted successfully"}
