"""
End-to-end flows through the Python API client against the in-process app
"""
import pytest
from sqlalchemy import select, func

from projexia.client import ProjexiaAPIError
from projexia.models import Task, ProjectMember


@pytest.mark.asyncio
async def test_project_task_lifecycle(api, test_user_data):
    user = await api.signup(test_user_data["name"], test_user_data["email"], test_user_data["password"])

    project = await api.create_project(
        {"name": "Launch", "description": "Q1 launch", "color": "#6366f1"},
        user["id"],
    )
    assert project["creatorId"] == user["id"]

    task = await api.create_task({
        "projectId": project["id"],
        "title": "Ship landing page",
        "description": "Copy, hero image and signup form",
        "dueDate": "2030-02-01T00:00:00Z",
        "creatorId": user["id"],
        "status": "todo",
    })
    assert task["status"] == "todo"

    updated = await api.update_task(task["id"], {"status": "completed"})
    assert updated["status"] == "completed"

    fetched = await api.fetch_project(project["id"])
    assert [(t["id"], t["status"]) for t in fetched["tasks"]] == [(task["id"], "completed")]
    assert fetched["updatedAt"] > fetched["createdAt"]


@pytest.mark.asyncio
async def test_task_for_missing_project_is_not_created(api, db_session, test_user):
    with pytest.raises(ProjexiaAPIError) as exc_info:
        await api.create_task({
            "projectId": "5f0c1a3e-0000-4000-8000-000000000000",
            "title": "Orphan",
            "description": "Should never be stored",
            "dueDate": "2030-02-01T00:00:00Z",
            "creatorId": test_user["id"],
        })

    assert exc_info.value.status_code == 404
    count = await db_session.scalar(select(func.count()).select_from(Task))
    assert count == 0


@pytest.mark.asyncio
async def test_duplicate_invite_keeps_member_count(api, db_session, test_project):
    await api.invite_member(test_project["id"], "bob@example.com")

    with pytest.raises(ProjexiaAPIError) as exc_info:
        await api.invite_member(test_project["id"], "bob@example.com")

    assert exc_info.value.status_code == 400
    count = await db_session.scalar(
        select(func.count()).select_from(ProjectMember).where(ProjectMember.project_id == test_project["id"])
    )
    assert count == 1


@pytest.mark.asyncio
async def test_deleted_project_leaves_nothing_behind(api, db_session, test_user, test_project, test_task):
    await api.invite_member(test_project["id"], "bob@example.com")

    await api.delete_project(test_project["id"], test_user["id"])

    assert await api.fetch_tasks(test_project["id"]) == []
    members = await db_session.scalar(
        select(func.count()).select_from(ProjectMember).where(ProjectMember.project_id == test_project["id"])
    )
    assert members == 0


@pytest.mark.asyncio
async def test_comment_routes_through_client(api, test_user, test_task):
    created = await api.create_comment(test_task["id"], "via /comments", test_user["id"])
    added = await api.add_task_comment(test_task["id"], "via /tasks", test_user["id"])

    comments = await api.fetch_comments(test_task["id"])
    assert [c["id"] for c in comments] == [created["id"], added["id"]]

    await api.delete_comment(created["id"])
    assert [c["id"] for c in await api.fetch_comments(test_task["id"])] == [added["id"]]


@pytest.mark.asyncio
async def test_client_health_check(api):
    health = await api.health_check()

    assert health["status"] == "Server is running"
