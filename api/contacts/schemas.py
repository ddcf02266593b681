"""
Pydantic schemas for contact-message endpoints.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel

ContactStatus = Literal["new", "read", "replied"]
CONTACT_STATUSES: tuple[str, ...] = ("new", "read", "replied")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _required(message: str, max_length: int):
    def check(value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError(message)
        if len(value) > max_length:
            raise ValueError(f"Must be at most {max_length} characters")
        return value

    return check


def normalize_email(value: str) -> str:
    value = (value or "").strip().lower()
    if len(value) > 320 or not EMAIL_PATTERN.match(value):
        raise ValueError("Valid email is required")
    return value


class ContactCreate(BaseModel):
    name: Annotated[str, AfterValidator(_required("Name is required", 100))]
    email: Annotated[str, AfterValidator(normalize_email)]
    subject: Annotated[str, AfterValidator(_required("Subject is required", 200))]
    message: Annotated[str, AfterValidator(_required("Message is required", 5000))]


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


class ContactMessage(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    status: ContactStatus
    created_at: datetime
