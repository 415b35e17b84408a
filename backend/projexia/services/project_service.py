"""
Project Service - projects, their members and the project chat feed

Projects are always returned populated: tasks (with comments) and members
are loaded eagerly so the response can be built outside the session.
"""

import logging
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, or_
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import IntegrityError

from projexia.models.project import Project, ProjectMember, MemberRole, ChatMessage
from projexia.models.task import Task, Comment
from projexia.models.user import User
from projexia.schemas.project import ProjectCreate, ProjectUpdate, ChatMessageCreate
from projexia.core.exceptions import (
    ValidationError,
    ConflictError,
    ForbiddenError,
    ProjectNotFoundError,
    MemberNotFoundError,
)
from projexia.core.security import default_avatar_url, normalize_email
from projexia.core.types import generate_uuid, is_valid_id, utcnow
from projexia.core.logging_config import logger


def populated_project_query():
    """SELECT for projects with tasks, task comments and members eagerly loaded"""
    return (
        select(Project)
        .options(
            selectinload(Project.tasks).selectinload(Task.comments),
            selectinload(Project.members),
        )
        .execution_options(populate_existing=True)
    )


class ProjectService:
    """Project CRUD, team membership and chat"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_project_row(self, project_id: str) -> Project:
        if not is_valid_id(project_id):
            raise ProjectNotFoundError(project_id)
        result = await self.db.execute(select(Project).where(Project.id == project_id))
        project = result.scalar_one_or_none()
        if not project:
            raise ProjectNotFoundError(project_id)
        return project

    # ========== Project Operations ==========

    async def list_projects(self, user_id: Optional[str] = None, email: Optional[str] = None) -> List[Project]:
        """
        All projects, or - when either filter is given - the projects the
        user created or has been added to as a member by e-mail.
        """
        stmt = populated_project_query()

        if user_id or email:
            conditions = []
            if user_id:
                conditions.append(Project.creator_id == user_id)
            if email:
                member_of = select(ProjectMember.project_id).where(ProjectMember.email == normalize_email(email))
                conditions.append(Project.id.in_(member_of))
            stmt = stmt.where(or_(*conditions))

        result = await self.db.execute(stmt.order_by(Project.created_at))
        return list(result.scalars().unique().all())

    async def get_project(self, project_id: str) -> Project:
        if not is_valid_id(project_id):
            raise ProjectNotFoundError(project_id)
        result = await self.db.execute(populated_project_query().where(Project.id == project_id))
        project = result.scalar_one_or_none()
        if not project:
            raise ProjectNotFoundError(project_id)
        return project

    async def create_project(self, data: ProjectCreate, user_id: Optional[str] = None) -> Project:
        """Create a project and any members supplied with it in one commit"""
        creator_id = user_id or data.creator_id
        if not creator_id:
            raise ValidationError("creatorId is required", field="creatorId")
        if not (data.name and data.description and data.color):
            raise ValidationError("name, description, and color are required")

        now = utcnow()
        project = Project(
            id=generate_uuid(),
            name=data.name,
            description=data.description,
            color=data.color,
            creator_id=creator_id,
            created_at=now,
            updated_at=now,
        )
        self.db.add(project)

        seen = set()
        for member in data.members or []:
            email = normalize_email(str(member.email))
            if email in seen:
                continue
            seen.add(email)
            self.db.add(ProjectMember(
                id=generate_uuid(),
                project_id=project.id,
                name=member.name or email,
                email=email,
                role=member.role or MemberRole.MEMBER,
                avatar_url=member.avatar_url or default_avatar_url(email),
                created_at=now,
            ))

        await self.db.commit()
        logger.log_project_event("Created project", project.id, members=len(seen))
        return await self.get_project(project.id)

    async def update_project(self, project_id: str, data: ProjectUpdate) -> Project:
        project = await self._get_project_row(project_id)

        # Empty strings keep the stored value
        if data.name:
            project.name = data.name
        if data.description:
            project.description = data.description
        project.updated_at = utcnow()

        await self.db.commit()
        return await self.get_project(project_id)

    async def delete_project(self, project_id: str, requester_id: Optional[str]) -> None:
        """Delete a project with its tasks, their comments, members and chat"""
        project = await self._get_project_row(project_id)

        if not requester_id or str(project.creator_id) != str(requester_id):
            logger.log_project_event("Refused delete of project", project_id, level=logging.WARNING, requester_id=requester_id)
            raise ForbiddenError("Only the admin can delete this project.")

        no_sync = {"synchronize_session": False}
        task_ids = select(Task.id).where(Task.project_id == project_id)
        await self.db.execute(delete(Comment).where(Comment.task_id.in_(task_ids)).execution_options(**no_sync))
        await self.db.execute(delete(Task).where(Task.project_id == project_id).execution_options(**no_sync))
        await self.db.execute(delete(ProjectMember).where(ProjectMember.project_id == project_id).execution_options(**no_sync))
        await self.db.execute(delete(ChatMessage).where(ChatMessage.project_id == project_id).execution_options(**no_sync))
        await self.db.execute(delete(Project).where(Project.id == project_id).execution_options(**no_sync))
        self.db.expunge(project)
        await self.db.commit()

        logger.log_project_event("Deleted project", project_id)

    # ========== Member Operations ==========

    async def _find_member_by_email(self, project_id: str, email: str) -> Optional[ProjectMember]:
        result = await self.db.execute(
            select(ProjectMember).where(
                ProjectMember.project_id == project_id,
                ProjectMember.email == email,
            )
        )
        return result.scalar_one_or_none()

    async def invite_member(self, project_id: str, email: Optional[str]) -> ProjectMember:
        if not email:
            raise ValidationError("Email is required", field="email")

        email = normalize_email(email)
        project = await self._get_project_row(project_id)

        if await self._find_member_by_email(project_id, email):
            raise ConflictError("Member already invited to this project")

        # Prefer the registered user's name and avatar when the address is known
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        name = user.name if user else email
        avatar_url = (user.avatar_url if user else None) or default_avatar_url(email)

        now = utcnow()
        member = ProjectMember(
            id=generate_uuid(),
            project_id=project.id,
            name=name,
            email=email,
            role=MemberRole.MEMBER,
            avatar_url=avatar_url,
            created_at=now,
        )
        self.db.add(member)
        project.updated_at = now
        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent invite for the same address got in first
            await self.db.rollback()
            raise ConflictError("Member already invited to this project")

        logger.log_project_event("Invited member to project", project_id, email=email)
        return member

    async def remove_member(self, project_id: str, member_id: str) -> None:
        """Remove a member. Not role-guarded: any caller may remove anyone."""
        await self._get_project_row(project_id)

        await self.db.execute(
            delete(ProjectMember)
            .where(ProjectMember.id == member_id, ProjectMember.project_id == project_id)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        logger.log_project_event("Removed member from project", project_id, member_id=member_id)

    async def update_member_role(self, project_id: str, member_id: str, role: Optional[str]) -> ProjectMember:
        if not role:
            raise ValidationError("Role is required", field="role")
        try:
            new_role = MemberRole(role)
        except ValueError:
            raise ValidationError("Role must be one of: admin, member, viewer", field="role")

        result = await self.db.execute(
            select(ProjectMember).where(
                ProjectMember.id == member_id,
                ProjectMember.project_id == project_id,
            )
        )
        member = result.scalar_one_or_none()
        if not member:
            raise MemberNotFoundError(member_id)

        member.role = new_role
        await self.db.commit()
        return member

    # ========== Chat Operations ==========

    async def list_chat(self, project_id: str) -> List[ChatMessage]:
        """Messages oldest first; same-instant messages in the order they were posted"""
        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.project_id == project_id)
            .order_by(ChatMessage.created_at, ChatMessage.seq)
        )
        return list(result.scalars().all())

    async def post_chat(self, project_id: str, data: ChatMessageCreate) -> ChatMessage:
        if not (data.user_id and data.user_name and data.content):
            raise ValidationError("userId, userName, and content are required")

        await self._get_project_row(project_id)

        message = ChatMessage(
            id=generate_uuid(),
            project_id=project_id,
            user_id=data.user_id,
            user_name=data.user_name,
            content=data.content,
            created_at=utcnow(),
        )
        self.db.add(message)
        await self.db.commit()
        return message
