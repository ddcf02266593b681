"""
Contact-message business logic.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from core import db
from core.errors import NotFound

from . import repository, schemas

logger = logging.getLogger(__name__)


def _to_contact(row: dict[str, Any]) -> schemas.ContactMessage:
    return schemas.ContactMessage.model_validate(row)


async def create_contact(payload: schemas.ContactCreate) -> schemas.ContactMessage:
    with db.store_call("Server error while sending message. Please try again later."):
        row = await repository.create_contact(
            name=payload.name,
            email=payload.email,
            subject=payload.subject,
            message=payload.message,
        )
    logger.info("contact_created id=%s", row["id"])
    return _to_contact(row)


async def list_contacts(*, status: str | None = None, page: int = 1, limit: int = 10) -> dict[str, Any]:
    """
    One page of messages, newest first. Unknown status values mean "all".
    """
    if status not in schemas.CONTACT_STATUSES:
        status = None

    with db.store_call("Server error while fetching messages"):
        rows = await repository.list_contacts(status=status, limit=limit, offset=(page - 1) * limit)
        total = await repository.count_contacts(status=status)

    return {
        "contacts": [_to_contact(row) for row in rows],
        "pagination": {
            "current": page,
            "pages": math.ceil(total / limit) if limit else 0,
            "total": total,
        },
    }


async def count_contacts() -> int:
    with db.store_call("Server error while counting messages"):
        return await repository.count_contacts()


async def recent_contacts(*, limit: int = 5) -> list[schemas.ContactMessage]:
    with db.store_call("Server error while fetching messages"):
        rows = await repository.list_contacts(limit=limit)
    return [_to_contact(row) for row in rows]


async def update_status(contact_id: int, status: str) -> schemas.ContactMessage:
    with db.store_call("Server error while updating status"):
        row = await repository.update_contact_status(contact_id, status)
    if row is None:
        raise NotFound("Contact message not found")
    return _to_contact(row)


async def delete_contact(contact_id: int) -> None:
    with db.store_call("Server error while deleting message"):
        removed = await repository.delete_contact(contact_id)
    if not removed:
        raise NotFound("Contact message not found")
