from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from contacts import repository as contact_repository
from core.media import MediaStoreError, get_media_store
from main import app
from projects import repository as project_repository


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


class FakeMediaStore:
    """
    In-memory stand-in for `core.media.MediaStore`; records every call in `events`.
    """

    def __init__(self, events: list[tuple[str, Any]]) -> None:
        self.events = events
        self.assets: dict[str, bytes] = {}
        self.fail_delete = False
        self._counter = 0

    def seed(self, public_id: str) -> dict[str, Any]:
        self.assets[public_id] = b"seed"
        return self._payload(public_id, b"seed")

    def _payload(self, public_id: str, data: bytes) -> dict[str, Any]:
        return {
            "secure_url": f"https://res.cloudinary.com/demo/image/upload/{public_id}.png",
            "public_id": public_id,
            "width": 800,
            "height": 600,
            "format": "png",
            "bytes": len(data),
        }

    async def upload(self, data: bytes, *, filename: str, content_type: str | None = None) -> dict[str, Any]:
        self._counter += 1
        public_id = f"portfolio/upload-{self._counter}"
        self.assets[public_id] = data
        self.events.append(("media.upload", public_id))
        return self._payload(public_id, data)

    async def delete(self, public_id: str) -> bool:
        self.events.append(("media.delete", public_id))
        if self.fail_delete:
            raise MediaStoreError("media store unavailable")
        return self.assets.pop(public_id, None) is not None


class FakeProjectStore:
    """
    In-memory stand-in for the functions in `projects.repository`.
    """

    def __init__(self, events: list[tuple[str, Any]]) -> None:
        self.events = events
        self.rows: dict[int, dict[str, Any]] = {}
        self.fail_create: BaseException | None = None
        self.fail_update: BaseException | None = None
        self.fail_get: BaseException | None = None
        self._next_id = 1
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _now(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def insert(self, **fields: Any) -> dict[str, Any]:
        now = self._now()
        row = {
            "id": self._next_id,
            "title": "Seeded project",
            "description": "A project seeded for tests.",
            "image": None,
            "technologies": [],
            "github_url": "",
            "live_url": "",
            "featured": False,
            "created_at": now,
            "updated_at": now,
        }
        row.update(fields)
        self.rows[row["id"]] = row
        self._next_id += 1
        return dict(row)

    async def create_project(self, **fields: Any) -> dict[str, Any]:
        self.events.append(("store.create", fields["title"]))
        if self.fail_create is not None:
            raise self.fail_create
        return self.insert(**fields)

    async def get_project(self, project_id: int) -> dict[str, Any] | None:
        self.events.append(("store.get", project_id))
        if self.fail_get is not None:
            raise self.fail_get
        row = self.rows.get(project_id)
        return dict(row) if row is not None else None

    async def list_projects(
        self,
        *,
        featured: bool | None = None,
        search_query: str = "",
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        rows = sorted(self.rows.values(), key=lambda r: (r["created_at"], r["id"]), reverse=True)
        if featured is not None:
            rows = [r for r in rows if r["featured"] == featured]
        q = search_query.strip().lower()
        if q:
            rows = [
                r
                for r in rows
                if q in r["title"].lower()
                or q in r["description"].lower()
                or any(q in tech.lower() for tech in r["technologies"])
            ]
        return [dict(r) for r in rows[offset : offset + limit]]

    async def list_featured_projects(self, limit: int = 6) -> list[dict[str, Any]]:
        return await self.list_projects(featured=True, limit=limit)

    async def count_projects(self) -> int:
        return len(self.rows)

    async def update_project(self, project_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        self.events.append(("store.update", project_id))
        if self.fail_update is not None:
            raise self.fail_update
        row = self.rows.get(project_id)
        if row is None:
            return None
        row.update(changes)
        row["updated_at"] = self._now()
        return dict(row)

    async def delete_project(self, project_id: int) -> bool:
        self.events.append(("store.delete", project_id))
        return self.rows.pop(project_id, None) is not None


class FakeContactStore:
    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    async def create_contact(self, *, name: str, email: str, subject: str, message: str) -> dict[str, Any]:
        self._clock += timedelta(seconds=1)
        row = {
            "id": self._next_id,
            "name": name,
            "email": email,
            "subject": subject,
            "message": message,
            "status": "new",
            "created_at": self._clock,
        }
        self.rows[row["id"]] = row
        self._next_id += 1
        return dict(row)

    def _filtered(self, status: str | None) -> list[dict[str, Any]]:
        rows = sorted(self.rows.values(), key=lambda r: (r["created_at"], r["id"]), reverse=True)
        return [r for r in rows if status is None or r["status"] == status]

    async def list_contacts(self, *, status: str | None = None, limit: int = 10, offset: int = 0) -> list[dict[str, Any]]:
        return [dict(r) for r in self._filtered(status)[offset : offset + limit]]

    async def count_contacts(self, *, status: str | None = None) -> int:
        return len(self._filtered(status))

    async def update_contact_status(self, contact_id: int, status: str) -> dict[str, Any] | None:
        row = self.rows.get(contact_id)
        if row is None:
            return None
        row["status"] = status
        return dict(row)

    async def delete_contact(self, contact_id: int) -> bool:
        return self.rows.pop(contact_id, None) is not None


@pytest.fixture()
def events() -> list[tuple[str, Any]]:
    return []


@pytest.fixture()
def media(events: list[tuple[str, Any]]) -> FakeMediaStore:
    return FakeMediaStore(events)


@pytest.fixture()
def project_store(monkeypatch: pytest.MonkeyPatch, events: list[tuple[str, Any]]) -> FakeProjectStore:
    store = FakeProjectStore(events)
    for name in (
        "create_project",
        "get_project",
        "list_projects",
        "list_featured_projects",
        "count_projects",
        "update_project",
        "delete_project",
    ):
        monkeypatch.setattr(project_repository, name, getattr(store, name))
    return store


@pytest.fixture()
def contact_store(monkeypatch: pytest.MonkeyPatch) -> FakeContactStore:
    store = FakeContactStore()
    for name in (
        "create_contact",
        "list_contacts",
        "count_contacts",
        "update_contact_status",
        "delete_contact",
    ):
        monkeypatch.setattr(contact_repository, name, getattr(store, name))
    return store


@pytest.fixture()
def client(media: FakeMediaStore):
    """
    TestClient with a fake media store; auth is left real.
    """
    app.dependency_overrides[get_media_store] = lambda: media
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def admin_client(client: TestClient) -> TestClient:
    app.dependency_overrides[auth_dependencies.require_admin] = lambda: {"username": "admin", "role": "admin"}
    return client
