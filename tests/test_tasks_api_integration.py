"""Integration tests for the board HTTP API."""
import pytest

from app.config import settings
from app.core.exceptions import NotFoundError
from app.dependencies import raise_board_failure
from app.schemas.notification import NotificationCode
from tests.conftest import TEST_USER


def test_board_requires_sign_in(client):
    response = client.get("/api/v1/tasks")

    assert response.status_code == 401
    assert client.get("/api/v1/categories").status_code == 401


def test_callback_resolves_navigation(client):
    response = client.post(
        "/api/v1/auth/callback",
        json={"user": TEST_USER, "location": "/login?redirect=/tasks"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["state"] == "authenticated"
    assert body["display_name"] == "Ada"
    assert body["navigate_to"] == "/tasks"

    me = client.get("/api/v1/auth/me").json()
    assert me["is_authenticated"] is True
    assert me["email_address"] == "ada@example.com"


def test_auth_error_and_logout(signed_in_client):
    response = signed_in_client.post("/api/v1/auth/logout")
    assert response.json()["navigate_to"] == "/login"
    assert signed_in_client.get("/api/v1/tasks").status_code == 401

    failed = signed_in_client.post("/api/v1/auth/error", json={"error": "popup closed"})
    assert failed.json()["state"] == "auth_failed"
    messages = [n["message"] for n in signed_in_client.get("/api/v1/notifications").json()]
    assert "Authentication failed. Please try again." in messages


def test_default_categories_when_store_is_empty(signed_in_client):
    response = signed_in_client.get("/api/v1/categories")

    assert response.status_code == 200
    categories = response.json()
    assert [c["name"] for c in categories] == ["Personal", "Work", "Shopping", "Health"]
    assert all(c["task_count"] == 0 for c in categories)


def test_task_lifecycle(signed_in_client):
    created = signed_in_client.post(
        "/api/v1/tasks",
        json={"title": "Buy milk", "priority": "low", "category_id": "default-3"},
    )
    assert created.status_code == 201
    task = created.json()
    assert task["priority"] == "low"
    assert task["is_completed"] is False
    assert task["category_name"] == "Shopping"

    signed_in_client.post("/api/v1/tasks", json={"title": "Walk dog"})

    toggled = signed_in_client.post(f"/api/v1/tasks/{task['id']}/toggle")
    assert toggled.status_code == 200
    assert toggled.json()["is_completed"] is True

    listing = signed_in_client.get("/api/v1/tasks").json()
    assert [item["title"] for item in listing["items"]] == ["Walk dog", "Buy milk"]
    assert listing["stats"] == {"total": 2, "completed": 1, "pending": 1, "completion_rate": 50}
    assert listing["state"] == "loaded"

    completed = signed_in_client.get("/api/v1/tasks", params={"filter": "completed"}).json()
    assert [item["id"] for item in completed["items"]] == [task["id"]]

    updated = signed_in_client.put(
        f"/api/v1/tasks/{task['id']}",
        json={"title": "Buy oat milk", "priority": "high", "category_id": "default-3"},
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Buy oat milk"
    assert updated.json()["is_completed"] is True

    deleted = signed_in_client.delete(f"/api/v1/tasks/{task['id']}")
    assert deleted.status_code == 204
    remaining = signed_in_client.get("/api/v1/tasks", params={"filter": "all"}).json()
    assert [item["title"] for item in remaining["items"]] == ["Walk dog"]


def test_blank_title_is_unprocessable(signed_in_client):
    response = signed_in_client.post("/api/v1/tasks", json={"title": "  "})

    assert response.status_code == 422
    assert response.json()["detail"] == "Please enter a task title"


def test_unknown_task_is_not_found(signed_in_client):
    assert signed_in_client.put("/api/v1/tasks/999", json={"title": "Ghost"}).status_code == 404
    assert signed_in_client.post("/api/v1/tasks/999/toggle").status_code == 404
    assert signed_in_client.delete("/api/v1/tasks/999").status_code == 404


def test_search_tasks(signed_in_client):
    signed_in_client.post("/api/v1/tasks", json={"title": "Buy milk"})
    signed_in_client.post("/api/v1/tasks", json={"title": "Read", "description": "milk science"})
    signed_in_client.post("/api/v1/tasks", json={"title": "Sleep"})

    response = signed_in_client.get("/api/v1/tasks/search", params={"q": "milk"})

    assert response.status_code == 200
    assert sorted(item["title"] for item in response.json()) == ["Buy milk", "Read"]


def test_stored_categories_and_counts(client, store):
    store.seed(settings.CATEGORIES_TABLE, [{"Name": "Work", "color": "#8b5cf6"}])
    store.seed(settings.TASKS_TABLE, [
        {"title": "Report", "category": 1},
        {"title": "Done already", "category": 1, "is_completed": "completed"},
    ])
    client.post("/api/v1/auth/callback", json={"user": TEST_USER, "location": "/"})

    categories = client.get("/api/v1/categories").json()
    assert categories == [{"id": "1", "name": "Work", "color": "#8b5cf6", "task_count": 1}]

    created = client.post("/api/v1/categories", json={"name": "Errands"})
    assert created.status_code == 201
    assert [c["name"] for c in client.get("/api/v1/categories").json()] == ["Errands", "Work"]

    assert client.delete("/api/v1/categories/1").status_code == 204
    assert client.delete("/api/v1/categories/1").status_code == 404
    tasks = client.get("/api/v1/tasks").json()["items"]
    assert all(item["category_id"] == "1" and item["category_name"] is None for item in tasks)


def test_blank_category_name_is_unprocessable(signed_in_client):
    assert signed_in_client.post("/api/v1/categories", json={"name": " "}).status_code == 422


def test_notifications_are_drained(signed_in_client):
    signed_in_client.post("/api/v1/tasks", json={"title": "Notify me"})

    first = signed_in_client.get("/api/v1/notifications").json()
    assert first[-1]["level"] == "success"
    assert first[-1]["message"] == "Task created successfully!"
    assert signed_in_client.get("/api/v1/notifications").json() == []


def test_health_and_metrics(signed_in_client):
    health = signed_in_client.get("/health").json()
    assert health["status"] == "ok"
    assert health["checks"] == {"record_store": "stub", "tasks": "loaded", "categories": "loaded"}

    metrics = signed_in_client.get("/metrics")
    assert metrics.status_code == 200
    assert "http_requests_total" in metrics.text
    assert "record_store_requests_total" in metrics.text


def test_board_failure_follows_latest_notification(board):
    board.notifier.success("tasks.deleted")
    board.notifier.error("tasks.not_found", code=NotificationCode.NOT_FOUND)

    with pytest.raises(NotFoundError) as exc_info:
        raise_board_failure(board)

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Task not found"
