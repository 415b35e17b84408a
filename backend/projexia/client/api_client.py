"""
Projexia - API Client
Thin async wrapper around the REST API used by front-ends and scripts.
"""
import os
from typing import Optional, Dict, Any, List

import httpx

DEFAULT_API_URL = "http://localhost:5000/api"


class ProjexiaAPIError(Exception):
    """Non-2xx response from the API"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def normalize_ids(data: Any) -> Any:
    """Recursively copy `_id` to `id` wherever a record lacks `id`"""
    if isinstance(data, list):
        return [normalize_ids(item) for item in data]
    if isinstance(data, dict):
        normalized = {key: normalize_ids(value) for key, value in data.items()}
        if "_id" in normalized and "id" not in normalized:
            normalized["id"] = normalized.pop("_id")
        return normalized
    return data


class ProjexiaAPIClient:
    """
    Async client for the Projexia REST API.

    Usage:
        async with ProjexiaAPIClient() as api:
            user = await api.login("ada@example.com", "secret")
            projects = await api.fetch_projects(user["id"], user["email"])

    `transport` can be an `httpx.ASGITransport` to talk to an app in-process.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or os.getenv("PROJEXIA_API_URL") or DEFAULT_API_URL).rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def open(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
                headers={"Content-Type": "application/json"},
            )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Send a request and return the decoded, id-normalized body"""
        if self._client is None:
            await self.open()

        if params:
            params = {key: value for key, value in params.items() if value is not None}

        response = await self._client.request(method, endpoint, json=data, params=params or None)

        if not response.is_success:
            try:
                body = response.json()
                message = body.get("message") if isinstance(body, dict) else None
            except ValueError:
                message = None
            raise ProjexiaAPIError(response.status_code, message or response.text or response.reason_phrase)

        if not response.content:
            return None
        return normalize_ids(response.json())

    # ==================== Health ====================
    async def health_check(self) -> Dict[str, Any]:
        # /health lives at the server root, outside the /api prefix
        root = self.base_url[:-len("/api")] if self.base_url.endswith("/api") else self.base_url
        return await self._request("GET", f"{root}/health")

    # ==================== Authentication ====================
    async def signup(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/signup", data={"name": name, "email": email, "password": password})

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/login", data={"email": email, "password": password})

    async def update_user_avatar(self, user_id: str, avatar_url: str) -> Dict[str, Any]:
        return await self._request("PUT", "/auth/me/avatar", data={"userId": user_id, "avatarUrl": avatar_url})

    async def get_current_user(self) -> Optional[Dict[str, Any]]:
        """Session user (only meaningful when the client keeps the session cookie)"""
        return await self._request("GET", "/auth/current-user")

    # ==================== Projects ====================
    async def fetch_projects(self, user_id: Optional[str] = None, email: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self._request("GET", "/projects", params={"userId": user_id, "email": email})

    async def fetch_project(self, project_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/projects/{project_id}")

    async def create_project(self, project: Dict[str, Any], creator_id: str) -> Dict[str, Any]:
        payload = {**project, "creatorId": creator_id}
        return await self._request("POST", "/projects", data=payload, params={"userId": creator_id})

    async def update_project(self, project_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/projects/{project_id}", data=updates)

    async def delete_project(self, project_id: str, user_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/projects/{project_id}", params={"userId": user_id})

    # ==================== Members ====================
    async def invite_member(self, project_id: str, email: str) -> Dict[str, Any]:
        return await self._request("POST", f"/projects/{project_id}/invite", data={"email": email})

    async def remove_member(self, project_id: str, member_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/projects/{project_id}/members/{member_id}")

    async def update_member_role(self, project_id: str, member_id: str, role: str) -> Dict[str, Any]:
        return await self._request("PUT", f"/projects/{project_id}/members/{member_id}", data={"role": role})

    # ==================== Chat ====================
    async def fetch_chat(self, project_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/projects/{project_id}/chat")

    async def post_chat_message(self, project_id: str, user_id: str, user_name: str, content: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/projects/{project_id}/chat",
            data={"userId": user_id, "userName": user_name, "content": content},
        )

    # ==================== Tasks ====================
    async def fetch_tasks(self, project_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/tasks/project/{project_id}")

    async def fetch_task(self, task_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/tasks/{task_id}")

    async def create_task(self, task: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/tasks", data=task)

    async def update_task(self, task_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/tasks/{task_id}", data=updates)

    async def delete_task(self, task_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/tasks/{task_id}")

    async def add_task_comment(self, task_id: str, content: str, user_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/tasks/{task_id}/comments", data={"content": content, "userId": user_id})

    # ==================== Comments ====================
    async def fetch_comments(self, task_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/comments/task/{task_id}")

    async def create_comment(self, task_id: str, content: str, user_id: str) -> Dict[str, Any]:
        return await self._request("POST", "/comments", data={"taskId": task_id, "content": content, "userId": user_id})

    async def delete_comment(self, comment_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/comments/{comment_id}")
