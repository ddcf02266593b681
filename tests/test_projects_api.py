from __future__ import annotations

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

VALID_FORM = {
    "title": "Portfolio site",
    "description": "A personal portfolio with a small admin panel.",
    "technologies": "python, fastapi",
    "live_url": "https://example.com",
}


def test_list_projects_is_public(client, project_store) -> None:
    project_store.insert(title="One")
    project_store.insert(title="Two", technologies=["FastAPI"])

    response = client.get("/api/projects", params={"q": "fastapi"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["count"] == 1
    assert payload["projects"][0]["title"] == "Two"


def test_get_missing_project_returns_404_shape(client, project_store) -> None:
    response = client.get("/api/projects/42")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Project not found"}


def test_featured_route_is_not_shadowed_by_id(client, project_store) -> None:
    project_store.insert(title="Starred", featured=True)

    response = client.get("/api/projects/featured")

    assert response.status_code == 200
    assert [p["title"] for p in response.json()["projects"]] == ["Starred"]


def test_mutations_require_admin_token(client, project_store, media, events) -> None:
    response = client.post(
        "/api/projects",
        data=VALID_FORM,
        files={"image": ("shot.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 401
    assert response.json()["success"] is False
    assert events == []


def test_create_with_image(admin_client, project_store, media) -> None:
    response = admin_client.post(
        "/api/projects",
        data=VALID_FORM,
        files={"image": ("shot.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Project created successfully"
    project = payload["project"]
    assert project["technologies"] == ["python", "fastapi"]
    assert project["image"]["public_id"] == "portfolio/upload-1"
    assert project["image"]["size_bytes"] == len(PNG_BYTES)


def test_create_invalid_form_removes_uploaded_image(admin_client, project_store, media, events) -> None:
    response = admin_client.post(
        "/api/projects",
        data={"description": "too short"},
        files={"image": ("shot.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "Validation failed"
    assert {err["field"] for err in payload["errors"]} == {"title", "description"}
    assert events[0] == ("media.upload", "portfolio/upload-1")
    assert ("media.delete", "portfolio/upload-1") in events
    assert media.assets == {}
    assert project_store.rows == {}


def test_create_rejects_non_image_before_upload(admin_client, project_store, media, events) -> None:
    response = admin_client.post(
        "/api/projects",
        data=VALID_FORM,
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400
    assert events == []


def test_update_featured_only(admin_client, project_store) -> None:
    seeded = project_store.insert(title="Keep me", technologies=["vue"])

    response = admin_client.put(f"/api/projects/{seeded['id']}", data={"featured": "true"})

    assert response.status_code == 200
    project = response.json()["project"]
    assert project["featured"] is True
    assert project["title"] == "Keep me"
    assert project["technologies"] == ["vue"]


def test_update_with_new_image_deletes_previous(admin_client, project_store, media, events) -> None:
    media.seed("portfolio/old")
    seeded = project_store.insert(image={"url": "https://img/old.png", "public_id": "portfolio/old"})

    response = admin_client.put(
        f"/api/projects/{seeded['id']}",
        files={"image": ("new.webp", PNG_BYTES, "image/webp")},
    )

    assert response.status_code == 200
    assert response.json()["project"]["image"]["public_id"] == "portfolio/upload-1"
    assert events.index(("store.update", seeded["id"])) < events.index(("media.delete", "portfolio/old"))


def test_update_missing_project_removes_upload(admin_client, project_store, media, events) -> None:
    response = admin_client.put(
        "/api/projects/77",
        data={"title": "Whatever"},
        files={"image": ("new.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 404
    assert ("media.delete", "portfolio/upload-1") in events


def test_delete_project(admin_client, project_store, media) -> None:
    media.fail_delete = True
    seeded = project_store.insert(image={"url": "https://img/old.png", "public_id": "portfolio/old"})

    first = admin_client.delete(f"/api/projects/{seeded['id']}")
    second = admin_client.delete(f"/api/projects/{seeded['id']}")

    assert first.status_code == 200
    assert first.json() == {"success": True, "message": "Project deleted successfully"}
    assert second.status_code == 404


def test_store_failure_maps_to_500(admin_client, project_store) -> None:
    project_store.fail_create = ConnectionError("database unavailable")

    response = admin_client.post("/api/projects", data=VALID_FORM)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Server error while creating project"}
