"""
Contact-message persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

CONTACT_COLUMNS = "id, name, email, subject, message, status, created_at"


async def create_contact(*, name: str, email: str, subject: str, message: str) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO contact_messages (name, email, subject, message)
        VALUES ($1, $2, $3, $4)
        RETURNING {CONTACT_COLUMNS}
        """,
        name,
        email,
        subject,
        message,
    )
    if row is None:
        raise RuntimeError("Failed to insert contact message.")
    return row


async def list_contacts(
    *,
    status: str | None = None,
    limit: int = 10,
    offset: int = 0,
) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {CONTACT_COLUMNS}
        FROM contact_messages
        WHERE ($1::text IS NULL OR status = $1)
        ORDER BY created_at DESC, id DESC
        LIMIT $2
        OFFSET $3
        """,
        status,
        limit,
        offset,
    )


async def count_contacts(*, status: str | None = None) -> int:
    value = await db.fetch_value(
        """
        SELECT count(*)
        FROM contact_messages
        WHERE ($1::text IS NULL OR status = $1)
        """,
        status,
    )
    return int(value or 0)


async def update_contact_status(contact_id: int, status: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE contact_messages
        SET status = $2
        WHERE id = $1
        RETURNING {CONTACT_COLUMNS}
        """,
        contact_id,
        status,
    )


async def delete_contact(contact_id: int) -> bool:
    status = await db.execute("DELETE FROM contact_messages WHERE id = $1", contact_id)
    return db.affected_rows(status) > 0
