"""Pydantic schemas for projects, members and chat"""
from pydantic import EmailStr
from typing import Optional, List
from datetime import datetime

from projexia.models.project import MemberRole
from projexia.schemas.common import CamelModel
from projexia.schemas.task import TaskResponse


# ==================== Member Schemas ====================

class MemberInput(CamelModel):
    """Member supplied together with a new project"""
    email: EmailStr
    name: Optional[str] = None
    role: Optional[MemberRole] = None
    avatar_url: Optional[str] = None


class InviteRequest(CamelModel):
    email: Optional[EmailStr] = None


class MemberRoleUpdate(CamelModel):
    # Plain string so an unknown role reaches the service and gets its message
    role: Optional[str] = None


class MemberResponse(CamelModel):
    id: str
    name: str
    email: str
    role: MemberRole
    avatar_url: Optional[str] = None
    project_id: str
    created_at: datetime


# ==================== Project Schemas ====================

class ProjectCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    creator_id: Optional[str] = None
    members: Optional[List[MemberInput]] = None


class ProjectUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class ProjectResponse(CamelModel):
    """Project with its tasks (and their comments) and members populated"""
    id: str
    name: str
    description: str
    color: str
    creator_id: str
    tasks: List[TaskResponse] = []
    members: List[MemberResponse] = []
    created_at: datetime
    updated_at: datetime


# ==================== Chat Schemas ====================

class ChatMessageCreate(CamelModel):
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    content: Optional[str] = None


class ChatMessageResponse(CamelModel):
    id: str
    project_id: str
    user_id: str
    user_name: str
    content: str
    created_at: datetime
