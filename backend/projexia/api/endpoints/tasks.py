"""Task endpoints"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from projexia.core.database import get_db
from projexia.schemas.common import MessageResponse
from projexia.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskCommentCreate,
    CommentResponse,
)
from projexia.services.task_service import TaskService


router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("/project/{project_id}", response_model=List[TaskResponse])
async def list_project_tasks(project_id: str, db: AsyncSession = Depends(get_db)):
    """All tasks of a project with their comments, oldest first"""
    return await TaskService(db).list_by_project(project_id)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, db: AsyncSession = Depends(get_db)):
    return await TaskService(db).get_task(task_id)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskCreate, db: AsyncSession = Depends(get_db)):
    return await TaskService(db).create_task(data)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: str, data: TaskUpdate, db: AsyncSession = Depends(get_db)):
    return await TaskService(db).update_task(task_id, data)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: str, db: AsyncSession = Depends(get_db)):
    await TaskService(db).delete_task(task_id)
    return MessageResponse(message="Task deleted successfully")


@router.post("/{task_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(task_id: str, data: TaskCommentCreate, db: AsyncSession = Depends(get_db)):
    return await TaskService(db).add_comment(task_id, data)
