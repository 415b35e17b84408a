"""Project, membership and chat models"""
from sqlalchemy import Column, Integer, String, DateTime, Enum as SQLEnum, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum

from projexia.core.database import Base
from projexia.core.types import GUID, generate_uuid, utcnow


class MemberRole(str, enum.Enum):
    """Roles within a project"""
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class Project(Base):
    """Project model - owns tasks, members and the chat feed"""
    __tablename__ = "projects"

    __table_args__ = (
        Index('ix_projects_creator_id', 'creator_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    color = Column(String(32), nullable=False)
    # Plain string: may hold an OAuth or external id that has no users row
    creator_id = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    tasks = relationship(
        "Task",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Task.created_at",
    )
    members = relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectMember.created_at",
    )
    chat_messages = relationship(
        "ChatMessage",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="[ChatMessage.created_at, ChatMessage.seq]",
    )

    def __repr__(self):
        return f"<Project {self.name}>"


class ProjectMember(Base):
    """A person on a project's team, keyed by e-mail"""
    __tablename__ = "project_members"

    __table_args__ = (
        Index('ix_project_members_project_id', 'project_id'),
        Index('ix_project_members_email', 'email'),
        Index('ix_project_members_project_email', 'project_id', 'email', unique=True),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    project_id = Column(GUID, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    role = Column(
        SQLEnum(MemberRole, values_callable=lambda e: [m.value for m in e], native_enum=False),
        default=MemberRole.MEMBER,
        nullable=False,
    )
    avatar_url = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    project = relationship("Project", back_populates="members")

    def __repr__(self):
        return f"<ProjectMember {self.email} in {self.project_id}>"


class ChatMessage(Base):
    """Append-only project chat message"""
    __tablename__ = "chat_messages"

    __table_args__ = (
        Index('ix_chat_messages_project_created', 'project_id', 'created_at'),
    )

    # Insertion order, breaks ties between messages posted in the same instant
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(GUID, unique=True, nullable=False, default=generate_uuid)
    project_id = Column(GUID, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(255), nullable=False)
    user_name = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    project = relationship("Project", back_populates="chat_messages")

    def __repr__(self):
        return f"<ChatMessage {self.id} in {self.project_id}>"
