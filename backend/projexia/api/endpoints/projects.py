"""
Project endpoints

Projects, their team members and the per-project chat feed.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from projexia.core.database import get_db
from projexia.schemas.common import MessageResponse
from projexia.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    InviteRequest,
    MemberRoleUpdate,
    MemberResponse,
    ChatMessageCreate,
    ChatMessageResponse,
)
from projexia.services.project_service import ProjectService


router = APIRouter(prefix="/projects", tags=["Projects"])


# ==================== Project CRUD ====================

@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    user_id: Optional[str] = Query(None, alias="userId"),
    email: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """
    List projects.

    With `userId` and/or `email`, only projects created by that user or
    having a member with that e-mail are returned.
    """
    return await ProjectService(db).list_projects(user_id=user_id, email=email)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str, db: AsyncSession = Depends(get_db)):
    return await ProjectService(db).get_project(project_id)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    user_id: Optional[str] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db)
):
    """Create a project. The creator comes from `?userId=` or `creatorId` in the body."""
    return await ProjectService(db).create_project(data, user_id=user_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(project_id: str, data: ProjectUpdate, db: AsyncSession = Depends(get_db)):
    return await ProjectService(db).update_project(project_id, data)


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    user_id: Optional[str] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db)
):
    """Delete a project and everything under it. Only its creator may do this."""
    await ProjectService(db).delete_project(project_id, requester_id=user_id)
    return MessageResponse(message="Project deleted successfully")


# ==================== Members ====================

@router.post("/{project_id}/invite", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def invite_member(project_id: str, data: InviteRequest, db: AsyncSession = Depends(get_db)):
    email = str(data.email) if data.email else None
    return await ProjectService(db).invite_member(project_id, email)


@router.delete("/{project_id}/members/{member_id}", response_model=MessageResponse)
async def remove_member(project_id: str, member_id: str, db: AsyncSession = Depends(get_db)):
    await ProjectService(db).remove_member(project_id, member_id)
    return MessageResponse(message="Member removed from project")


@router.put("/{project_id}/members/{member_id}", response_model=MemberResponse)
async def update_member_role(
    project_id: str,
    member_id: str,
    data: MemberRoleUpdate,
    db: AsyncSession = Depends(get_db)
):
    return await ProjectService(db).update_member_role(project_id, member_id, data.role)


# ==================== Chat ====================

@router.get("/{project_id}/chat", response_model=List[ChatMessageResponse])
async def list_chat(project_id: str, db: AsyncSession = Depends(get_db)):
    return await ProjectService(db).list_chat(project_id)


@router.post("/{project_id}/chat", response_model=ChatMessageResponse, status_code=status.HTTP_201_CREATED)
async def post_chat(project_id: str, data: ChatMessageCreate, db: AsyncSession = Depends(get_db)):
    return await ProjectService(db).post_chat(project_id, data)
