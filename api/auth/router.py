"""
Admin API endpoints: login, token check and the dashboard.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends

from contacts import service as contact_service
from core.settings import Settings, get_settings
from projects import service as project_service

from . import dependencies, schemas, service

router = APIRouter(prefix="/api/admin")

RECENT_LIMIT = 5


@router.post("/login")
async def login(
    request: schemas.LoginRequest,
    settings: Settings = Depends(get_settings),
) -> schemas.LoginResponse:
    return service.login(request, config=settings.admin)


@router.post("/verify")
async def verify(admin: dict = Depends(dependencies.require_admin)) -> dict:
    return {"success": True, "message": "Token is valid", "admin": admin}


@router.get("/dashboard")
async def dashboard(_: dict = Depends(dependencies.require_admin)) -> dict:
    # A failing query cancels the others; its own error is what the client sees.
    try:
        async with asyncio.TaskGroup() as tg:
            project_count = tg.create_task(project_service.count_projects())
            contact_count = tg.create_task(contact_service.count_contacts())
            recent_projects = tg.create_task(project_service.list_projects(limit=RECENT_LIMIT))
            recent_contacts = tg.create_task(contact_service.recent_contacts(limit=RECENT_LIMIT))
    except ExceptionGroup as group:
        raise group.exceptions[0] from group
    return {
        "success": True,
        "data": {
            "stats": {"projects": project_count.result(), "contacts": contact_count.result()},
            "recent_projects": recent_projects.result(),
            "recent_contacts": recent_contacts.result(),
        },
    }
