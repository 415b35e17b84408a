"""Comment endpoints addressed by task id"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from projexia.core.database import get_db
from projexia.schemas.common import MessageResponse
from projexia.schemas.task import CommentCreate, CommentResponse
from projexia.services.comment_service import CommentService


router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("/task/{task_id}", response_model=List[CommentResponse])
async def list_task_comments(task_id: str, db: AsyncSession = Depends(get_db)):
    return await CommentService(db).list_by_task(task_id)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(data: CommentCreate, db: AsyncSession = Depends(get_db)):
    return await CommentService(db).create_comment(data)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(comment_id: str, db: AsyncSession = Depends(get_db)):
    await CommentService(db).delete_comment(comment_id)
    return MessageResponse(message="Comment deleted successfully")
