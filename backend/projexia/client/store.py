"""
Projexia - client-side state container

Holds the signed-in user, the visible projects, the active project and its
tasks. Every mutation goes to the API first and then reloads from the
server instead of patching local state, so the store never drifts from
what the API would return.
"""
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any, List, Union

from projexia.client.api_client import ProjexiaAPIClient, ProjexiaAPIError

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "projexia_current_user"


class ProjectStore:
    """State container backed by a ProjexiaAPIClient"""

    def __init__(self, api: ProjexiaAPIClient, storage_path: Optional[Union[str, Path]] = None):
        self.api = api
        self.storage_path = Path(storage_path) if storage_path else None

        self.current_user: Optional[Dict[str, Any]] = None
        self.projects: List[Dict[str, Any]] = []
        self.current_project: Optional[Dict[str, Any]] = None
        self.tasks: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.is_loading: bool = False

    # ========== Persistence ==========

    def _read_stored_user(self) -> Optional[Dict[str, Any]]:
        if not self.storage_path or not self.storage_path.exists():
            return None
        try:
            stored = json.loads(self.storage_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"[Store] Ignoring unreadable user cache {self.storage_path}: {e}")
            return None
        return stored.get(CURRENT_USER_KEY) if isinstance(stored, dict) else None

    def _write_stored_user(self, user: Optional[Dict[str, Any]]) -> None:
        if not self.storage_path:
            return
        if user is None:
            self.storage_path.unlink(missing_ok=True)
            return
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        self.storage_path.write_text(json.dumps({CURRENT_USER_KEY: user}), encoding="utf-8")

    def _set_user(self, user: Optional[Dict[str, Any]]) -> None:
        self.current_user = user
        self._write_stored_user(user)
        if user is None:
            self.projects = []
            self.current_project = None
            self.tasks = []

    def _require_user(self) -> Dict[str, Any]:
        if not self.current_user:
            raise ProjexiaAPIError(401, "Not authenticated")
        return self.current_user

    async def _run(self, failure_message: str, coro):
        """Await an API call, recording failure_message in `error` when it fails"""
        self.error = None
        try:
            return await coro
        except ProjexiaAPIError:
            self.error = failure_message
            raise

    # ========== Session ==========

    async def initialize(self) -> None:
        """Restore the cached user and, if there is one, load their projects"""
        self.is_loading = True
        try:
            self.current_user = self._read_stored_user()
            if self.current_user:
                await self.load_projects()
        finally:
            self.is_loading = False

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        self.is_loading = True
        try:
            user = await self.api.login(email, password)
            self._set_user(user)
            await self.load_projects()
            return user
        finally:
            self.is_loading = False

    async def signup(self, name: str, email: str, password: str) -> Dict[str, Any]:
        self.is_loading = True
        try:
            user = await self.api.signup(name, email, password)
            self._set_user(user)
            await self.load_projects()
            return user
        finally:
            self.is_loading = False

    def logout(self) -> None:
        self._set_user(None)

    async def update_avatar(self, avatar_url: str) -> str:
        user = self._require_user()
        result = await self._run("Failed to update avatar.", self.api.update_user_avatar(user["id"], avatar_url))
        self._set_user({**user, "avatarUrl": result["avatarUrl"]})
        return result["avatarUrl"]

    # ========== Loading ==========

    async def load_projects(self) -> List[Dict[str, Any]]:
        """
        Reload the user's projects. Keeps the active project when it still
        exists, selects the first project when none is active.
        """
        user = self.current_user or {}
        projects = await self._run(
            "Failed to load projects. Please try refreshing the page.",
            self.api.fetch_projects(user.get("id"), user.get("email")),
        )
        self.projects = projects

        active_id = self.current_project["id"] if self.current_project else None
        refreshed = next((p for p in projects if p["id"] == active_id), None) if active_id else None
        if refreshed is None:
            refreshed = projects[0] if projects else None
        self.current_project = refreshed

        if self.current_project:
            await self.load_tasks()
        else:
            self.tasks = []
        return projects

    async def load_tasks(self) -> List[Dict[str, Any]]:
        if not self.current_project:
            self.tasks = []
            return self.tasks

        tasks = await self._run(
            "Failed to load tasks. Please try refreshing the page.",
            self.api.fetch_tasks(self.current_project["id"]),
        )
        self.tasks = tasks
        self.current_project = {**self.current_project, "tasks": tasks}
        return tasks

    async def select_project(self, project_id: str) -> Dict[str, Any]:
        project = next((p for p in self.projects if p["id"] == project_id), None)
        if project is None:
            project = await self._run("Failed to load project.", self.api.fetch_project(project_id))
        self.current_project = project
        await self.load_tasks()
        return self.current_project

    # ========== Projects ==========

    async def create_project(self, name: str, description: str, color: str,
                             members: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        user = self._require_user()
        project = await self._run(
            "Failed to create project.",
            self.api.create_project(
                {"name": name, "description": description, "color": color, "members": members or []},
                user["id"],
            ),
        )
        self.current_project = project
        await self.load_projects()
        return project

    async def update_project(self, project_id: str, **updates) -> Dict[str, Any]:
        project = await self._run("Failed to update project.", self.api.update_project(project_id, updates))
        await self.load_projects()
        return project

    async def delete_project(self, project_id: str) -> None:
        user = self._require_user()
        await self._run("Failed to delete project. Please try again.", self.api.delete_project(project_id, user["id"]))
        if self.current_project and self.current_project["id"] == project_id:
            self.current_project = None
        await self.load_projects()

    # ========== Tasks ==========

    async def create_task(self, task: Dict[str, Any]) -> Dict[str, Any]:
        user = self._require_user()
        payload = {"creatorId": user["id"], **task}
        if "projectId" not in payload and self.current_project:
            payload["projectId"] = self.current_project["id"]
        created = await self._run("Failed to create task. Please try again.", self.api.create_task(payload))
        await self.load_projects()
        return created

    async def update_task(self, task_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        updated = await self._run("Failed to update task. Please try again.", self.api.update_task(task_id, updates))
        await self.load_projects()
        return updated

    async def delete_task(self, task_id: str) -> None:
        await self._run("Failed to delete task. Please try again.", self.api.delete_task(task_id))
        await self.load_projects()

    async def add_comment(self, task_id: str, content: str) -> Dict[str, Any]:
        user = self._require_user()
        comment = await self._run(
            "Failed to add comment. Please try again.",
            self.api.add_task_comment(task_id, content, user["id"]),
        )
        await self.load_projects()
        return comment

    # ========== Members ==========

    async def invite_member(self, project_id: str, email: str) -> Dict[str, Any]:
        member = await self._run("Failed to invite member.", self.api.invite_member(project_id, email))
        await self.load_projects()
        return member

    async def remove_member(self, project_id: str, member_id: str) -> None:
        await self._run("Failed to remove member.", self.api.remove_member(project_id, member_id))
        await self.load_projects()

    async def update_member_role(self, project_id: str, member_id: str, role: str) -> Dict[str, Any]:
        member = await self._run("Failed to update member role.", self.api.update_member_role(project_id, member_id, role))
        await self.load_projects()
        return member

    # ========== Chat ==========

    async def load_chat(self, project_id: Optional[str] = None) -> List[Dict[str, Any]]:
        project_id = project_id or (self.current_project or {}).get("id")
        if not project_id:
            return []
        return await self._run("Failed to load chat.", self.api.fetch_chat(project_id))

    async def send_chat_message(self, content: str, project_id: Optional[str] = None) -> Dict[str, Any]:
        user = self._require_user()
        project_id = project_id or (self.current_project or {}).get("id")
        if not project_id:
            raise ProjexiaAPIError(400, "No project selected")
        return await self._run(
            "Failed to send message.",
            self.api.post_chat_message(project_id, user["id"], user["name"], content),
        )
