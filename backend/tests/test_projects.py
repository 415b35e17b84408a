import pytest
from httpx import AsyncClient

from projexia.services.project_service import ProjectService


@pytest.mark.asyncio
async def test_create_project(client: AsyncClient, test_user, project_payload):
    payload = project_payload(name="Launch", description="Q1 launch", color="#6366f1")

    response = await client.post("/api/projects", params={"userId": test_user["id"]}, json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Launch"
    assert data["description"] == "Q1 launch"
    assert data["color"] == "#6366f1"
    assert data["creatorId"] == test_user["id"]
    assert data["tasks"] == []
    assert data["members"] == []
    assert "createdAt" in data
    assert "updatedAt" in data


@pytest.mark.asyncio
async def test_create_project_creator_from_body(client: AsyncClient, test_user, project_payload):
    response = await client.post("/api/projects", json=project_payload(creatorId=test_user["id"]))

    assert response.status_code == 201
    assert response.json()["creatorId"] == test_user["id"]


@pytest.mark.asyncio
async def test_create_project_requires_creator(client: AsyncClient, project_payload):
    response = await client.post("/api/projects", json=project_payload())

    assert response.status_code == 400
    assert response.json()["message"] == "creatorId is required"


@pytest.mark.asyncio
async def test_create_project_requires_fields(client: AsyncClient, test_user, project_payload):
    response = await client.post(
        "/api/projects",
        params={"userId": test_user["id"]},
        json=project_payload(color=""),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "name, description, and color are required"


@pytest.mark.asyncio
async def test_create_project_with_members(client: AsyncClient, test_user, project_payload):
    """Members supplied with the project get defaults and are de-duplicated by e-mail"""
    payload = project_payload(members=[
        {"email": "bob@example.com", "name": "Bob", "role": "viewer"},
        {"email": "carol@example.com"},
        {"email": "bob@example.com", "name": "Bob again"},
    ])

    response = await client.post("/api/projects", params={"userId": test_user["id"]}, json=payload)

    assert response.status_code == 201
    members = {m["email"]: m for m in response.json()["members"]}
    assert set(members) == {"bob@example.com", "carol@example.com"}
    assert members["bob@example.com"]["name"] == "Bob"
    assert members["bob@example.com"]["role"] == "viewer"
    assert members["carol@example.com"]["name"] == "carol@example.com"
    assert members["carol@example.com"]["role"] == "member"
    assert "seed=carol%40example.com" in members["carol@example.com"]["avatarUrl"]


@pytest.mark.asyncio
async def test_list_projects_filters_by_creator_or_member(client: AsyncClient, test_user, project_payload):
    own = (await client.post(
        "/api/projects", params={"userId": test_user["id"]}, json=project_payload(name="Mine")
    )).json()
    shared = (await client.post(
        "/api/projects",
        params={"userId": "someone-else"},
        json=project_payload(name="Shared", members=[{"email": test_user["email"]}]),
    )).json()
    (await client.post(
        "/api/projects", params={"userId": "someone-else"}, json=project_payload(name="Hidden")
    )).json()

    response = await client.get(
        "/api/projects",
        params={"userId": test_user["id"], "email": test_user["email"]},
    )

    assert response.status_code == 200
    ids = [p["id"] for p in response.json()]
    assert sorted(ids) == sorted([own["id"], shared["id"]])


@pytest.mark.asyncio
async def test_list_projects_unfiltered(client: AsyncClient, test_user, project_payload):
    for user_id in (test_user["id"], "someone-else"):
        await client.post("/api/projects", params={"userId": user_id}, json=project_payload())

    response = await client.get("/api/projects")

    assert response.status_code == 200
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_get_project(client: AsyncClient, test_project, test_task):
    response = await client.get(f"/api/projects/{test_project['id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == test_project["id"]
    assert [t["id"] for t in data["tasks"]] == [test_task["id"]]


@pytest.mark.asyncio
async def test_get_project_not_found(client: AsyncClient):
    response = await client.get("/api/projects/5f0c1a3e-0000-4000-8000-000000000000")

    assert response.status_code == 404
    assert response.json()["message"] == "Project not found"


@pytest.mark.asyncio
async def test_get_project_malformed_id(client: AsyncClient):
    response = await client.get("/api/projects/not-a-real-id")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_project(client: AsyncClient, test_project):
    response = await client.put(
        f"/api/projects/{test_project['id']}",
        json={"name": "Renamed", "description": ""},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    # Empty description keeps the stored one
    assert data["description"] == test_project["description"]
    assert data["updatedAt"] >= test_project["updatedAt"]


@pytest.mark.asyncio
async def test_update_project_not_found(client: AsyncClient):
    response = await client.put(
        "/api/projects/5f0c1a3e-0000-4000-8000-000000000000",
        json={"name": "Renamed"},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_project_by_creator_cascades(client: AsyncClient, test_user, test_project, test_task):
    project_id = test_project["id"]
    await client.post(
        f"/api/tasks/{test_task['id']}/comments",
        json={"content": "Looks good", "userId": test_user["id"]},
    )
    await client.post(f"/api/projects/{project_id}/invite", json={"email": "bob@example.com"})
    await client.post(
        f"/api/projects/{project_id}/chat",
        json={"userId": test_user["id"], "userName": test_user["name"], "content": "hi"},
    )

    response = await client.delete(f"/api/projects/{project_id}", params={"userId": test_user["id"]})

    assert response.status_code == 200
    assert response.json()["message"] == "Project deleted successfully"
    assert (await client.get(f"/api/projects/{project_id}")).status_code == 404
    assert (await client.get(f"/api/tasks/{test_task['id']}")).status_code == 404
    assert (await client.get(f"/api/comments/task/{test_task['id']}")).json() == []
    assert (await client.get(f"/api/projects/{project_id}/chat")).json() == []


@pytest.mark.asyncio
async def test_delete_project_forbidden_for_non_creator(client: AsyncClient, test_project):
    response = await client.delete(f"/api/projects/{test_project['id']}", params={"userId": "intruder"})

    assert response.status_code == 403
    assert response.json()["message"] == "Only the admin can delete this project."
    assert (await client.get(f"/api/projects/{test_project['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_delete_project_without_requester(client: AsyncClient, test_project):
    response = await client.delete(f"/api/projects/{test_project['id']}")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_invite_member(client: AsyncClient, test_project):
    response = await client.post(
        f"/api/projects/{test_project['id']}/invite",
        json={"email": "bob@example.com"},
    )

    assert response.status_code == 201
    member = response.json()
    assert member["email"] == "bob@example.com"
    assert member["name"] == "bob@example.com"
    assert member["role"] == "member"
    assert member["projectId"] == test_project["id"]

    project = (await client.get(f"/api/projects/{test_project['id']}")).json()
    assert [m["id"] for m in project["members"]] == [member["id"]]
    assert project["updatedAt"] >= test_project["updatedAt"]


@pytest.mark.asyncio
async def test_invite_registered_user_uses_profile(client: AsyncClient, test_project):
    signup = await client.post(
        "/api/auth/signup",
        json={"name": "Dana Scully", "email": "dana@example.com", "password": "secret123"},
    )
    user = signup.json()

    response = await client.post(
        f"/api/projects/{test_project['id']}/invite",
        json={"email": "dana@example.com"},
    )

    assert response.status_code == 201
    assert response.json()["name"] == "Dana Scully"
    assert response.json()["avatarUrl"] == user["avatarUrl"]


@pytest.mark.asyncio
async def test_invite_member_twice(client: AsyncClient, test_project):
    url = f"/api/projects/{test_project['id']}/invite"
    await client.post(url, json={"email": "bob@example.com"})

    response = await client.post(url, json={"email": "bob@example.com"})

    assert response.status_code == 400
    assert response.json()["message"] == "Member already invited to this project"


@pytest.mark.asyncio
async def test_invite_member_requires_email(client: AsyncClient, test_project):
    response = await client.post(f"/api/projects/{test_project['id']}/invite", json={})

    assert response.status_code == 400
    assert response.json()["message"] == "Email is required"


@pytest.mark.asyncio
async def test_invite_member_unknown_project(client: AsyncClient):
    response = await client.post(
        "/api/projects/5f0c1a3e-0000-4000-8000-000000000000/invite",
        json={"email": "bob@example.com"},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_remove_member(client: AsyncClient, test_project):
    member = (await client.post(
        f"/api/projects/{test_project['id']}/invite",
        json={"email": "bob@example.com"},
    )).json()

    response = await client.delete(f"/api/projects/{test_project['id']}/members/{member['id']}")

    assert response.status_code == 200
    assert response.json()["message"] == "Member removed from project"
    project = (await client.get(f"/api/projects/{test_project['id']}")).json()
    assert project["members"] == []


@pytest.mark.asyncio
async def test_update_member_role(client: AsyncClient, test_project):
    member = (await client.post(
        f"/api/projects/{test_project['id']}/invite",
        json={"email": "bob@example.com"},
    )).json()

    response = await client.put(
        f"/api/projects/{test_project['id']}/members/{member['id']}",
        json={"role": "admin"},
    )

    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert response.json()["id"] == member["id"]


@pytest.mark.asyncio
@pytest.mark.parametrize("body,message", [
    ({}, "Role is required"),
    ({"role": "owner"}, "Role must be one of: admin, member, viewer"),
])
async def test_update_member_role_validation(client: AsyncClient, test_project, body, message):
    member = (await client.post(
        f"/api/projects/{test_project['id']}/invite",
        json={"email": "bob@example.com"},
    )).json()

    response = await client.put(
        f"/api/projects/{test_project['id']}/members/{member['id']}",
        json=body,
    )

    assert response.status_code == 400
    assert response.json()["message"] == message


@pytest.mark.asyncio
async def test_update_member_role_member_of_other_project(client: AsyncClient, test_user, test_project, project_payload):
    other = (await client.post(
        "/api/projects", params={"userId": test_user["id"]}, json=project_payload()
    )).json()
    member = (await client.post(
        f"/api/projects/{other['id']}/invite",
        json={"email": "bob@example.com"},
    )).json()

    response = await client.put(
        f"/api/projects/{test_project['id']}/members/{member['id']}",
        json={"role": "viewer"},
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Member not found"


@pytest.mark.asyncio
async def test_invited_member_found_by_any_casing(client: AsyncClient, test_project):
    """Invites and the member filter of the project list compare lower-cased addresses"""
    url = f"/api/projects/{test_project['id']}/invite"
    response = await client.post(url, json={"email": "Bob@Example.COM"})
    assert response.status_code == 201
    assert response.json()["email"] == "bob@example.com"

    for email in ("Bob@Example.COM", "bob@example.com"):
        response = await client.get("/api/projects", params={"email": email})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [test_project["id"]]

    response = await client.post(url, json={"email": "bob@example.com"})
    assert response.status_code == 400
    assert response.json()["message"] == "Member already invited to this project"


@pytest.mark.asyncio
async def test_create_project_members_matched_case_insensitively(client: AsyncClient, test_user, project_payload):
    created = (await client.post(
        "/api/projects",
        params={"userId": "someone-else"},
        json=project_payload(members=[{"email": "Carol@Example.COM"}]),
    )).json()

    response = await client.get("/api/projects", params={"email": "CAROL@example.com"})

    assert [p["id"] for p in response.json()] == [created["id"]]


@pytest.mark.asyncio
async def test_invite_member_race_is_a_conflict(client: AsyncClient, test_project, monkeypatch):
    """A duplicate that slips past the lookup is caught by the unique index"""
    async def not_found(self, project_id, email):
        return None

    url = f"/api/projects/{test_project['id']}/invite"
    assert (await client.post(url, json={"email": "bob@example.com"})).status_code == 201

    monkeypatch.setattr(ProjectService, "_find_member_by_email", not_found)
    response = await client.post(url, json={"email": "bob@example.com"})

    assert response.status_code == 400
    assert response.json()["message"] == "Member already invited to this project"
    project = (await client.get(f"/api/projects/{test_project['id']}")).json()
    assert [m["email"] for m in project["members"]] == ["bob@example.com"]
