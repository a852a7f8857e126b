# mypy: ignore-errors
# tests/v1/test_threads_api.py
"""Tests for thread endpoints."""

from fastapi import status


def test_thread_lifecycle(client, as_user) -> None:
    created = client.post(
        "/api/v1/threads/", json={"title": "Help", "description": "Ask here"}, headers=as_user("staff")
    )
    assert created.status_code == status.HTTP_201_CREATED
    thread = created.json()
    assert thread["status"] == "OPEN"

    client.post("/api/v1/posts/", json={"title": "Q", "body": "B", "thread": "Help"}, headers=as_user("alice"))
    assert client.get(f"/api/v1/threads/{thread['thread_id']}").json()["post_count"] == 1

    forbidden = client.put(
        f"/api/v1/threads/{thread['thread_id']}",
        json={"title": "Mine", "description": "Now"},
        headers=as_user("alice"),
    )
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN
    assert forbidden.json()["detail"] == "You can only update threads you created."

    closed = client.put(
        f"/api/v1/threads/{thread['thread_id']}",
        json={"title": "Help", "description": "Closed now", "status": "CLOSED"},
        headers=as_user("staff"),
    )
    assert closed.json()["status"] == "CLOSED"

    deleted = client.delete(f"/api/v1/threads/{thread['thread_id']}", headers=as_user("staff"))
    assert deleted.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/threads/{thread['thread_id']}").status_code == status.HTTP_404_NOT_FOUND


def test_list_threads_open_first(client, as_user) -> None:
    client.post(
        "/api/v1/threads/",
        json={"title": "Old", "description": "D", "status": "CLOSED"},
        headers=as_user("staff"),
    )
    client.post("/api/v1/threads/", json={"title": "New", "description": "D"}, headers=as_user("staff"))

    titles = [t["title"] for t in client.get("/api/v1/threads/").json()]
    assert titles == ["New", "Old"]
    closed = client.get("/api/v1/threads/", params={"status": "CLOSED"}).json()
    assert [t["title"] for t in closed] == ["Old"]
