"""
Pydantic schemas for project endpoints.

Create and update share the same field rules; update makes every field
optional and only touches the ones that were sent.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field

TITLE_MAX_LENGTH = 100
DESCRIPTION_MIN_LENGTH = 10

URL_PATTERN = re.compile(
    r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
)


def _clean_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Project title is required")
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title cannot be more than {TITLE_MAX_LENGTH} characters")
    return value


def _clean_description(value: str) -> str:
    # Stored as sent; the length check counts surrounding whitespace too.
    if len(value) < DESCRIPTION_MIN_LENGTH:
        raise ValueError(f"Description must be at least {DESCRIPTION_MIN_LENGTH} characters long")
    return value


def _clean_url(value: str) -> str:
    value = value.strip()
    if value and not URL_PATTERN.match(value):
        raise ValueError("Please use a valid URL with HTTP or HTTPS")
    return value


def _split_technologies(value: Any) -> Any:
    # Forms send "python, fastapi, postgres"; JSON clients may send a list.
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return value


Title = Annotated[str, AfterValidator(_clean_title)]
Description = Annotated[str, AfterValidator(_clean_description)]
Url = Annotated[str, AfterValidator(_clean_url)]
Technologies = Annotated[list[str], BeforeValidator(_split_technologies)]


class ImageDescriptor(BaseModel):
    """
    Image metadata stored on a project.

    Either empty (no image) or pointing at exactly one media-store asset.
    Optional metadata is kept as None when the store did not report it.
    """

    url: str = ""
    public_id: str = ""
    width: int | None = None
    height: int | None = None
    format: str | None = None
    size_bytes: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.url and not self.public_id

    def to_column(self) -> dict[str, Any] | None:
        return None if self.is_empty else self.model_dump()


class ProjectCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Title
    description: Description
    technologies: Technologies = Field(default_factory=list)
    github_url: Url = ""
    live_url: Url = ""
    featured: bool = False


class ProjectPatch(BaseModel):
    """
    Partial update: one optional slot per mutable attribute.

    None means "not sent"; a sent value replaces the stored one. `image` is not
    a slot here because it only ever comes from an upload.
    """

    model_config = ConfigDict(extra="ignore")

    title: Title | None = None
    description: Description | None = None
    technologies: Annotated[list[str] | None, BeforeValidator(_split_technologies)] = None
    github_url: Url | None = None
    live_url: Url | None = None
    featured: bool | None = None

    def changes(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.title is not None:
            out["title"] = self.title
        if self.description is not None:
            out["description"] = self.description
        if self.technologies is not None:
            out["technologies"] = self.technologies
        if self.github_url is not None:
            out["github_url"] = self.github_url
        if self.live_url is not None:
            out["live_url"] = self.live_url
        if self.featured is not None:
            out["featured"] = self.featured
        return out


class Project(BaseModel):
    id: int
    title: str
    description: str
    image: ImageDescriptor | None = None
    technologies: list[str] = Field(default_factory=list)
    github_url: str = ""
    live_url: str = ""
    featured: bool = False
    created_at: datetime
    updated_at: datetime
