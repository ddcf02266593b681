"""
Image attachment resolver.

Turns whatever an upload backend handed back into the `ImageDescriptor`
stored on a project. Cloudinary reports `secure_url`/`public_id`/`bytes`;
disk-style backends report `path`/`filename`/`size`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .schemas import ImageDescriptor


def _first(upload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = upload.get(key)
        if value not in (None, ""):
            return value
    return None


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def resolve_image(upload: Mapping[str, Any] | None) -> ImageDescriptor:
    """
    Build the canonical descriptor for an upload result.

    `None` gives an empty descriptor so callers can treat "no file" the same way.
    """
    if not upload:
        return ImageDescriptor()

    fmt = _first(upload, "format")
    return ImageDescriptor(
        url=str(_first(upload, "secure_url", "url", "path") or ""),
        public_id=str(_first(upload, "public_id", "filename") or ""),
        width=_optional_int(_first(upload, "width")),
        height=_optional_int(_first(upload, "height")),
        format=str(fmt) if fmt is not None else None,
        size_bytes=_optional_int(_first(upload, "bytes", "size")),
    )


def image_from_column(value: Mapping[str, Any] | None) -> ImageDescriptor:
    """
    Read the `projects.image` jsonb column back into a descriptor.
    """
    if not value:
        return ImageDescriptor()
    return ImageDescriptor.model_validate(dict(value))
