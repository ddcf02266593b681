"""
Project mutation orchestration.

The upload (if any) has already happened by the time these run: the route
pushes the file to the media store first and passes the store's payload in as
`upload`. From there:

create: validate -> (on failure) delete the upload -> insert
update: load -> validate -> (on failure) delete the upload -> partial update
        -> only then delete the replaced image; any failure before that point
        deletes the upload

A store failure on create leaves the upload in place.
delete: load -> best-effort delete of the image -> delete the row

Compensating deletes never hide the original error; their own failures are
only logged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from core import db
from core import errors
from core.media import MediaStore, MediaStoreError

from . import images, repository, schemas

logger = logging.getLogger(__name__)


def _to_project(row: Mapping[str, Any]) -> schemas.Project:
    image = images.image_from_column(row.get("image"))
    return schemas.Project(
        id=int(row["id"]),
        title=str(row["title"]),
        description=str(row["description"]),
        image=None if image.is_empty else image,
        technologies=list(row.get("technologies") or []),
        github_url=str(row.get("github_url") or ""),
        live_url=str(row.get("live_url") or ""),
        featured=bool(row.get("featured", False)),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


async def discard_asset(image: schemas.ImageDescriptor, *, media: MediaStore, reason: str) -> None:
    """
    Delete a media-store asset without letting a failure escape.
    """
    if not image.public_id:
        return None
    try:
        deleted = await media.delete(image.public_id)
    except MediaStoreError:
        logger.exception("compensation_failed public_id=%s reason=%s", image.public_id, reason)
        return None
    if deleted:
        logger.info("asset_deleted public_id=%s reason=%s", image.public_id, reason)
    else:
        logger.warning("asset_missing public_id=%s reason=%s", image.public_id, reason)


def _validation_failure(exc: ValidationError) -> errors.ValidationFailure:
    return errors.ValidationFailure("Validation failed", errors=errors.field_errors(exc))


async def list_projects(
    *,
    featured: bool | None = None,
    search_query: str = "",
    limit: int = 100,
    offset: int = 0,
) -> list[schemas.Project]:
    with db.store_call("Server error while fetching projects"):
        rows = await repository.list_projects(
            featured=featured,
            search_query=search_query,
            limit=limit,
            offset=offset,
        )
    return [_to_project(row) for row in rows]


async def featured_projects() -> list[schemas.Project]:
    with db.store_call("Server error while fetching projects"):
        rows = await repository.list_featured_projects()
    return [_to_project(row) for row in rows]


async def count_projects() -> int:
    with db.store_call("Server error while counting projects"):
        return await repository.count_projects()


async def get_project(project_id: int) -> schemas.Project:
    with db.store_call("Server error while fetching project"):
        row = await repository.get_project(project_id)
    if row is None:
        raise errors.NotFound("Project not found")
    return _to_project(row)


async def create_project(
    fields: Mapping[str, Any],
    *,
    upload: Mapping[str, Any] | None = None,
    media: MediaStore,
) -> schemas.Project:
    image = images.resolve_image(upload)

    try:
        payload = schemas.ProjectCreate.model_validate(dict(fields))
    except ValidationError as exc:
        await discard_asset(image, media=media, reason="validation_failed")
        raise _validation_failure(exc) from exc

    # Store failures on insert leave the upload in place.
    try:
        with db.store_call("Server error while creating project"):
            row = await repository.create_project(
                title=payload.title,
                description=payload.description,
                image=image.to_column(),
                technologies=payload.technologies,
                github_url=payload.github_url,
                live_url=payload.live_url,
                featured=payload.featured,
            )
    except errors.ValidationFailure:
        await discard_asset(image, media=media, reason="constraint_violation")
        raise

    project = _to_project(row)
    logger.info("project_created id=%s has_image=%s", project.id, not image.is_empty)
    return project


async def update_project(
    project_id: int,
    fields: Mapping[str, Any],
    *,
    upload: Mapping[str, Any] | None = None,
    media: MediaStore,
) -> schemas.Project:
    new_image = images.resolve_image(upload)

    try:
        with db.store_call("Server error while updating project"):
            existing = await repository.get_project(project_id)
    except errors.UpstreamStoreFailure:
        await discard_asset(new_image, media=media, reason="store_failed")
        raise
    if existing is None:
        await discard_asset(new_image, media=media, reason="project_not_found")
        raise errors.NotFound("Project not found")

    try:
        patch = schemas.ProjectPatch.model_validate(dict(fields))
    except ValidationError as exc:
        await discard_asset(new_image, media=media, reason="validation_failed")
        raise _validation_failure(exc) from exc

    changes = patch.changes()
    if not new_image.is_empty:
        changes["image"] = new_image.to_column()

    try:
        with db.store_call("Server error while updating project"):
            row = await repository.update_project(project_id, changes)
    except errors.ValidationFailure:
        await discard_asset(new_image, media=media, reason="constraint_violation")
        raise
    except errors.UpstreamStoreFailure:
        # The old image is still referenced by the stored row; only the new one goes.
        await discard_asset(new_image, media=media, reason="store_failed")
        raise
    if row is None:
        # Deleted between lookup and write.
        await discard_asset(new_image, media=media, reason="project_not_found")
        raise errors.NotFound("Project not found")

    old_image = images.image_from_column(existing.get("image"))
    if not new_image.is_empty and old_image.public_id and old_image.public_id != new_image.public_id:
        await discard_asset(old_image, media=media, reason="image_replaced")

    logger.info("project_updated id=%s fields=%s", project_id, ",".join(sorted(changes)))
    return _to_project(row)


async def delete_project(project_id: int, *, media: MediaStore) -> None:
    with db.store_call("Server error while deleting project"):
        existing = await repository.get_project(project_id)
    if existing is None:
        raise errors.NotFound("Project not found")

    # Asset removal is best-effort; the row is deleted either way.
    await discard_asset(images.image_from_column(existing.get("image")), media=media, reason="project_deleted")

    with db.store_call("Server error while deleting project"):
        removed = await repository.delete_project(project_id)
    if removed:
        logger.info("project_deleted id=%s", project_id)
    else:
        logger.info("project_already_deleted id=%s", project_id)
