"""Task Service - tasks under a project and the comments posted on them"""

from typing import List
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, update
from sqlalchemy.orm import selectinload

from projexia.models.project import Project
from projexia.models.task import Task, TaskStatus, TaskPriority, Comment
from projexia.schemas.task import TaskCreate, TaskUpdate, TaskCommentCreate
from projexia.core.exceptions import ValidationError, ProjectNotFoundError, TaskNotFoundError
from projexia.core.types import generate_uuid, is_valid_id, to_naive_utc, utcnow
from projexia.core.logging_config import logger


def task_query():
    return (
        select(Task)
        .options(selectinload(Task.comments))
        .execution_options(populate_existing=True)
    )


class TaskService:
    """Task CRUD. Every write also bumps the parent project's updated_at."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_task_row(self, task_id: str) -> Task:
        if not is_valid_id(task_id):
            raise TaskNotFoundError(task_id)
        result = await self.db.execute(select(Task).where(Task.id == task_id))
        task = result.scalar_one_or_none()
        if not task:
            raise TaskNotFoundError(task_id)
        return task

    async def _touch_project(self, project_id: str, now: datetime) -> None:
        await self.db.execute(
            update(Project).where(Project.id == project_id).values(updated_at=now)
        )

    async def list_by_project(self, project_id: str) -> List[Task]:
        result = await self.db.execute(
            task_query().where(Task.project_id == project_id).order_by(Task.created_at)
        )
        return list(result.scalars().all())

    async def get_task(self, task_id: str) -> Task:
        if not is_valid_id(task_id):
            raise TaskNotFoundError(task_id)
        result = await self.db.execute(task_query().where(Task.id == task_id))
        task = result.scalar_one_or_none()
        if not task:
            raise TaskNotFoundError(task_id)
        return task

    async def create_task(self, data: TaskCreate) -> Task:
        """Create a task; the project must already exist"""
        project = None
        if is_valid_id(data.project_id):
            result = await self.db.execute(select(Project).where(Project.id == data.project_id))
            project = result.scalar_one_or_none()
        if not project:
            raise ProjectNotFoundError(data.project_id)

        if not (data.title and data.description and data.due_date and data.creator_id):
            raise ValidationError("title, description, dueDate, and creatorId are required")

        now = utcnow()
        task = Task(
            id=generate_uuid(),
            project_id=project.id,
            title=data.title,
            description=data.description,
            status=data.status or TaskStatus.BACKLOG,
            priority=data.priority or TaskPriority.MEDIUM,
            due_date=to_naive_utc(data.due_date),
            assignee_id=data.assignee_id,
            creator_id=data.creator_id,
            tags=list(data.tags or []),
            attachments=[],
            created_at=now,
            updated_at=now,
        )
        self.db.add(task)
        project.updated_at = now
        await self.db.commit()

        logger.log_task_event("Created task", task.id, project.id)
        return await self.get_task(task.id)

    async def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        """
        Apply a partial update.

        Falsy values mean "leave unchanged", so a field cannot be cleared to
        an empty string this way. assigneeId is the exception: sending the
        key at all (including null) overwrites it.
        """
        task = await self._get_task_row(task_id)

        if data.title:
            task.title = data.title
        if data.description:
            task.description = data.description
        if data.status:
            task.status = data.status
        if data.priority:
            task.priority = data.priority
        if data.due_date:
            task.due_date = to_naive_utc(data.due_date)
        if "assignee_id" in data.model_fields_set:
            task.assignee_id = data.assignee_id
        if data.tags:
            task.tags = list(data.tags)

        now = utcnow()
        task.updated_at = now
        await self._touch_project(task.project_id, now)
        await self.db.commit()

        return await self.get_task(task_id)

    async def delete_task(self, task_id: str) -> None:
        """Delete a task and its comments"""
        task = await self._get_task_row(task_id)
        project_id = task.project_id

        await self.db.execute(
            delete(Comment).where(Comment.task_id == task_id).execution_options(synchronize_session=False)
        )
        await self.db.execute(
            delete(Task).where(Task.id == task_id).execution_options(synchronize_session=False)
        )
        self.db.expunge(task)
        await self._touch_project(project_id, utcnow())
        await self.db.commit()

        logger.log_task_event("Deleted task", task_id, project_id)

    async def add_comment(self, task_id: str, data: TaskCommentCreate) -> Comment:
        task = await self._get_task_row(task_id)

        if not (data.content and data.user_id):
            raise ValidationError("content and userId are required")

        now = utcnow()
        comment = Comment(
            id=generate_uuid(),
            task_id=task.id,
            user_id=data.user_id,
            content=data.content,
            created_at=now,
        )
        self.db.add(comment)
        task.updated_at = now
        await self._touch_project(task.project_id, now)
        await self.db.commit()
        return comment
