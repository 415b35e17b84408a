"""Comment Service - comments addressed by task id rather than through the task"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from projexia.models.task import Task, Comment
from projexia.schemas.task import CommentCreate
from projexia.core.exceptions import ValidationError, TaskNotFoundError, CommentNotFoundError
from projexia.core.types import generate_uuid, is_valid_id, utcnow


class CommentService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_by_task(self, task_id: str) -> List[Comment]:
        if not is_valid_id(task_id):
            raise ValidationError("Invalid task ID", field="taskId")

        result = await self.db.execute(
            select(Comment).where(Comment.task_id == task_id).order_by(Comment.created_at)
        )
        return list(result.scalars().all())

    async def create_comment(self, data: CommentCreate) -> Comment:
        if not (data.content and data.user_id and data.task_id):
            raise ValidationError("Content, userId, and taskId are required")
        if not is_valid_id(data.task_id):
            raise ValidationError("Invalid task ID", field="taskId")

        result = await self.db.execute(select(Task.id).where(Task.id == data.task_id))
        if result.scalar_one_or_none() is None:
            raise TaskNotFoundError(data.task_id)

        comment = Comment(
            id=generate_uuid(),
            task_id=data.task_id,
            user_id=data.user_id,
            content=data.content,
            created_at=utcnow(),
        )
        self.db.add(comment)
        await self.db.commit()
        return comment

    async def delete_comment(self, comment_id: str) -> None:
        if not is_valid_id(comment_id):
            raise ValidationError("Invalid comment ID", field="id")

        result = await self.db.execute(
            delete(Comment)
            .where(Comment.id == comment_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise CommentNotFoundError(comment_id)
        await self.db.commit()
