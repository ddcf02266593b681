"""
Contact-message API endpoints.

Anyone may send a message; reading and managing them needs an admin token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/contact")


@router.post("", status_code=201)
async def create_contact(request: schemas.ContactCreate) -> dict:
    contact = await service.create_contact(request)
    return {
        "success": True,
        "message": "Message sent successfully! We will get back to you soon.",
        "contact": {
            "id": contact.id,
            "name": contact.name,
            "email": contact.email,
            "subject": contact.subject,
            "created_at": contact.created_at,
        },
    }


@router.get("")
async def list_contacts(
    status: str | None = Query(default=None, max_length=20),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    data = await service.list_contacts(status=status, page=page, limit=limit)
    return {"success": True, "data": data}


@router.put("/{contact_id}/status")
async def update_contact_status(
    contact_id: int,
    request: schemas.ContactStatusUpdate,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    contact = await service.update_status(contact_id, request.status)
    return {"success": True, "message": "Status updated successfully", "contact": contact}


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: int,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    await service.delete_contact(contact_id)
    return {"success": True, "message": "Contact message deleted successfully"}
