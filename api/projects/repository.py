"""
Project persistence (raw SQL).

The `projects` table carries CHECK constraints that mirror the schema rules;
a violation surfaces as `ValidationFailure` so callers treat it like any other
bad input.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db
from core.errors import ValidationFailure

PROJECT_COLUMNS = """
    id, title, description, image, technologies,
    github_url, live_url, featured, created_at, updated_at
"""

# Columns a partial update may set, in SET-clause order.
UPDATABLE_COLUMNS = (
    "title",
    "description",
    "image",
    "technologies",
    "github_url",
    "live_url",
    "featured",
)

FEATURED_LIMIT = 6


def _constraint_failure(exc: asyncpg.CheckViolationError) -> ValidationFailure:
    # Constraint names follow "projects_<column>_check".
    name = getattr(exc, "constraint_name", None) or ""
    field = name.removeprefix("projects_").removesuffix("_check") or "__root__"
    return ValidationFailure(
        "Validation failed",
        errors=[{"field": field, "message": f"Value violates constraint {name or 'check'}"}],
    )


async def create_project(
    *,
    title: str,
    description: str,
    image: dict[str, Any] | None,
    technologies: list[str],
    github_url: str,
    live_url: str,
    featured: bool,
) -> dict[str, Any]:
    try:
        row = await db.fetch_one(
            f"""
            INSERT INTO projects (title, description, image, technologies, github_url, live_url, featured)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING {PROJECT_COLUMNS}
            """,
            title,
            description,
            image,
            technologies,
            github_url,
            live_url,
            featured,
        )
    except asyncpg.CheckViolationError as exc:
        raise _constraint_failure(exc) from exc
    if row is None:
        raise RuntimeError("Failed to insert project.")
    return row


async def get_project(project_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {PROJECT_COLUMNS}
        FROM projects
        WHERE id = $1
        """,
        project_id,
    )


async def list_projects(
    *,
    featured: bool | None = None,
    search_query: str = "",
    limit: int = 100,
    offset: int = 0,
) -> list[dict[str, Any]]:
    """
    List projects newest first.

    `search_query` is a plain substring (no wildcards) matched against title,
    description or any technology, case-insensitively.
    """
    q = (search_query or "").strip().lower()
    return await db.fetch_all(
        f"""
        SELECT {PROJECT_COLUMNS}
        FROM projects
        WHERE ($1::boolean IS NULL OR featured = $1)
          AND (
            $2 = ''
            OR strpos(lower(title), $2) > 0
            OR strpos(lower(description), $2) > 0
            OR EXISTS (
              SELECT 1 FROM unnest(technologies) AS tech
              WHERE strpos(lower(tech), $2) > 0
            )
          )
        ORDER BY created_at DESC, id DESC
        LIMIT $3
        OFFSET $4
        """,
        featured,
        q,
        limit,
        offset,
    )


async def list_featured_projects(limit: int = FEATURED_LIMIT) -> list[dict[str, Any]]:
    return await list_projects(featured=True, limit=limit)


async def count_projects() -> int:
    return int(await db.fetch_value("SELECT count(*) FROM projects") or 0)


async def update_project(project_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
    """
    Apply a partial update and return the updated row (None when missing).

    Only keys present in `changes` are written; `updated_at` always advances.
    """
    unknown = set(changes) - set(UPDATABLE_COLUMNS)
    if unknown:
        raise ValueError(f"Not updatable: {sorted(unknown)}")

    args: list[Any] = [project_id]
    assignments: list[str] = []
    for column in UPDATABLE_COLUMNS:
        if column in changes:
            args.append(changes[column])
            assignments.append(f"{column} = ${len(args)}")
    assignments.append("updated_at = now()")

    try:
        return await db.fetch_one(
            f"""
            UPDATE projects
            SET {", ".join(assignments)}
            WHERE id = $1
            RETURNING {PROJECT_COLUMNS}
            """,
            *args,
        )
    except asyncpg.CheckViolationError as exc:
        raise _constraint_failure(exc) from exc


async def delete_project(project_id: int) -> bool:
    status = await db.execute("DELETE FROM projects WHERE id = $1", project_id)
    return db.affected_rows(status) > 0
