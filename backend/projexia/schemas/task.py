"""Pydantic schemas for tasks and comments"""
from typing import Optional, List, Any
from datetime import datetime

from projexia.models.task import TaskStatus, TaskPriority
from projexia.schemas.common import CamelModel


# ==================== Comment Schemas ====================

class TaskCommentCreate(CamelModel):
    """Comment posted under /tasks/{id}/comments"""
    content: Optional[str] = None
    user_id: Optional[str] = None


class CommentCreate(TaskCommentCreate):
    """Comment posted to /comments, task given in the body"""
    task_id: Optional[str] = None


class CommentResponse(CamelModel):
    id: str
    content: str
    user_id: str
    task_id: str
    created_at: datetime


# ==================== Task Schemas ====================

class TaskCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    assignee_id: Optional[str] = None
    creator_id: Optional[str] = None
    tags: Optional[List[str]] = None
    project_id: Optional[str] = None


class TaskUpdate(CamelModel):
    """
    Partial update. Empty values leave the stored field alone, except
    assigneeId which is applied whenever the key is sent (null unassigns).
    """
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    assignee_id: Optional[str] = None
    tags: Optional[List[str]] = None


class TaskResponse(CamelModel):
    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime
    assignee_id: Optional[str] = None
    creator_id: str
    tags: List[str] = []
    attachments: List[Any] = []
    comments: List[CommentResponse] = []
    project_id: str
    created_at: datetime
    updated_at: datetime
