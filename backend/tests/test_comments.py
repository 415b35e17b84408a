import pytest
from httpx import AsyncClient

MISSING_ID = "5f0c1a3e-0000-4000-8000-000000000000"


@pytest.mark.asyncio
async def test_create_and_list_comments(client: AsyncClient, test_user, test_task):
    first = await client.post(
        "/api/comments",
        json={"taskId": test_task["id"], "content": "First", "userId": test_user["id"]},
    )
    second = await client.post(
        "/api/comments",
        json={"taskId": test_task["id"], "content": "Second", "userId": test_user["id"]},
    )
    assert first.status_code == 201
    assert second.status_code == 201

    response = await client.get(f"/api/comments/task/{test_task['id']}")

    assert response.status_code == 200
    assert [c["content"] for c in response.json()] == ["First", "Second"]


@pytest.mark.asyncio
async def test_comment_shows_up_on_task(client: AsyncClient, test_user, test_task):
    comment = (await client.post(
        "/api/comments",
        json={"taskId": test_task["id"], "content": "Visible", "userId": test_user["id"]},
    )).json()

    task = (await client.get(f"/api/tasks/{test_task['id']}")).json()

    assert [c["id"] for c in task["comments"]] == [comment["id"]]


@pytest.mark.asyncio
async def test_create_comment_missing_fields(client: AsyncClient, test_task):
    response = await client.post("/api/comments", json={"taskId": test_task["id"], "content": "x"})

    assert response.status_code == 400
    assert response.json()["message"] == "Content, userId, and taskId are required"


@pytest.mark.asyncio
async def test_create_comment_malformed_task_id(client: AsyncClient, test_user):
    response = await client.post(
        "/api/comments",
        json={"taskId": "nope", "content": "x", "userId": test_user["id"]},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid task ID"


@pytest.mark.asyncio
async def test_create_comment_unknown_task(client: AsyncClient, test_user):
    response = await client.post(
        "/api/comments",
        json={"taskId": MISSING_ID, "content": "x", "userId": test_user["id"]},
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Task not found"


@pytest.mark.asyncio
async def test_list_comments_malformed_task_id(client: AsyncClient):
    response = await client.get("/api/comments/task/nope")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid task ID"


@pytest.mark.asyncio
async def test_delete_comment(client: AsyncClient, test_user, test_task):
    comment = (await client.post(
        "/api/comments",
        json={"taskId": test_task["id"], "content": "Remove me", "userId": test_user["id"]},
    )).json()

    response = await client.delete(f"/api/comments/{comment['id']}")

    assert response.status_code == 200
    assert response.json()["message"] == "Comment deleted successfully"
    assert (await client.get(f"/api/comments/task/{test_task['id']}")).json() == []


@pytest.mark.asyncio
async def test_delete_comment_not_found(client: AsyncClient):
    response = await client.delete(f"/api/comments/{MISSING_ID}")

    assert response.status_code == 404
    assert response.json()["message"] == "Comment not found"


@pytest.mark.asyncio
async def test_delete_comment_malformed_id(client: AsyncClient):
    response = await client.delete("/api/comments/nope")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid comment ID"
