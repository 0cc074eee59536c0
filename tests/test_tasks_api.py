from uuid import uuid4

import pytest


def _create(client, headers, **body):
    r = client.post("/api/tasks", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["data"]["task"]


def test_tasks_require_authentication(client):
    r = client.get("/api/tasks")

    assert r.status_code == 401
    assert r.json()["success"] is False


def test_tasks_reject_garbage_token(client):
    r = client.get("/api/tasks", headers={"Authorization": "Bearer garbage"})

    assert r.status_code == 401
    assert r.json()["message"] == "Invalid or expired token"


def test_create_task(client, auth_headers):
    r = client.post(
        "/api/tasks",
        json={"title": "  Write report ", "description": "Q3 numbers"},
        headers=auth_headers,
    )

    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Task created successfully"
    task = body["data"]["task"]
    assert task["title"] == "Write report"
    assert task["status"] == "PENDING"
    assert set(task) == {"id", "title", "description", "status", "userId", "createdAt", "updatedAt"}


@pytest.mark.parametrize(
    ("body", "field"),
    [
        ({"title": "   "}, "title"),
        ({}, "title"),
        ({"title": "ok", "status": "DONE"}, "status"),
    ],
)
def test_create_task_validation(client, auth_headers, body, field):
    r = client.post("/api/tasks", json=body, headers=auth_headers)

    assert r.status_code == 400
    assert field in {e["field"] for e in r.json()["errors"]}


def test_list_pagination(client, auth_headers):
    for i in range(25):
        _create(client, auth_headers, title=f"task {i}")

    r = client.get("/api/tasks", params={"page": 3, "limit": 10}, headers=auth_headers)

    assert r.status_code == 200
    data = r.json()["data"]
    assert len(data["tasks"]) == 5
    assert data["pagination"] == {"page": 3, "limit": 10, "total": 25, "totalPages": 3}


def test_list_defaults(client, auth_headers):
    _create(client, auth_headers, title="one")

    data = client.get("/api/tasks", headers=auth_headers).json()["data"]

    assert data["pagination"] == {"page": 1, "limit": 10, "total": 1, "totalPages": 1}


@pytest.mark.parametrize(
    "params",
    [
        {"page": 0},
        {"limit": 0},
        {"limit": "ten"},
        {"status": "DONE"},
        {"limit": 101},
        {"limit": 10**20},
        {"page": 10**20},
    ],
)
def test_list_rejects_bad_query(client, auth_headers, params):
    r = client.get("/api/tasks", params=params, headers=auth_headers)

    assert r.status_code == 400
    assert r.json()["success"] is False


def test_list_status_filter_and_all(client, auth_headers):
    _create(client, auth_headers, title="a")
    _create(client, auth_headers, title="b", status="COMPLETED")

    done = client.get("/api/tasks", params={"status": "COMPLETED"}, headers=auth_headers).json()
    everything = client.get("/api/tasks", params={"status": "ALL"}, headers=auth_headers).json()

    assert [t["title"] for t in done["data"]["tasks"]] == ["b"]
    assert everything["data"]["pagination"]["total"] == 2


def test_list_search(client, auth_headers):
    _create(client, auth_headers, title="Buy Milk")
    _create(client, auth_headers, title="Call mom", description="milk")

    data = client.get("/api/tasks", params={"search": "MILK"}, headers=auth_headers).json()["data"]

    assert [t["title"] for t in data["tasks"]] == ["Buy Milk"]


def test_get_task(client, auth_headers):
    task = _create(client, auth_headers, title="a")

    r = client.get(f"/api/tasks/{task['id']}", headers=auth_headers)

    assert r.status_code == 200
    assert r.json()["data"]["task"]["id"] == task["id"]


@pytest.mark.parametrize("task_id", ["not-a-uuid", str(uuid4())])
def test_get_missing_task(client, auth_headers, task_id):
    r = client.get(f"/api/tasks/{task_id}", headers=auth_headers)

    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Task not found"}


def test_tasks_are_scoped_to_their_owner(client, auth_headers, other_headers):
    task = _create(client, auth_headers, title="alice only")
    url = f"/api/tasks/{task['id']}"

    listed = client.get("/api/tasks", headers=other_headers).json()["data"]
    assert listed["tasks"] == []

    assert client.get(url, headers=other_headers).status_code == 404
    assert client.patch(url, json={"title": "bob"}, headers=other_headers).status_code == 404
    assert client.post(f"{url}/toggle", headers=other_headers).status_code == 404
    assert client.delete(url, headers=other_headers).status_code == 404

    mine = client.get(url, headers=auth_headers).json()["data"]["task"]
    assert mine["title"] == "alice only"
    assert mine["status"] == "PENDING"


def test_patch_with_empty_description(client, auth_headers):
    task = _create(client, auth_headers, title="a", description="something")

    r = client.patch(f"/api/tasks/{task['id']}", json={"description": ""}, headers=auth_headers)

    assert r.status_code == 200
    updated = r.json()["data"]["task"]
    assert updated["description"] == ""
    assert updated["title"] == "a"
    assert r.json()["message"] == "Task updated successfully"


def test_patch_rejects_null_title(client, auth_headers):
    task = _create(client, auth_headers, title="a")

    r = client.patch(f"/api/tasks/{task['id']}", json={"title": None}, headers=auth_headers)

    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "title"


def test_toggle_task(client, auth_headers):
    task = _create(client, auth_headers, title="a", status="IN_PROGRESS")
    url = f"/api/tasks/{task['id']}/toggle"

    first = client.post(url, headers=auth_headers).json()
    second = client.post(url, headers=auth_headers).json()

    assert first["message"] == "Task status toggled successfully"
    assert first["data"]["task"]["status"] == "COMPLETED"
    assert second["data"]["task"]["status"] == "PENDING"


def test_delete_task(client, auth_headers):
    task = _create(client, auth_headers, title="a")
    url = f"/api/tasks/{task['id']}"

    r = client.delete(url, headers=auth_headers)

    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Task deleted successfully"}
    assert client.get(url, headers=auth_headers).status_code == 404
    assert client.delete(url, headers=auth_headers).status_code == 404
