"""Task and comment models"""
from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
import enum

from projexia.core.database import Base
from projexia.core.types import GUID, generate_uuid, utcnow


class TaskStatus(str, enum.Enum):
    """Kanban column. Any transition is allowed."""
    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Task(Base):
    """Task model"""
    __tablename__ = "tasks"

    __table_args__ = (
        Index('ix_tasks_project_id', 'project_id'),
        Index('ix_tasks_status', 'status'),
        Index('ix_tasks_assignee_id', 'assignee_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    project_id = Column(GUID, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)

    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(
        SQLEnum(TaskStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        default=TaskStatus.BACKLOG,
        nullable=False,
    )
    priority = Column(
        SQLEnum(TaskPriority, values_callable=lambda e: [m.value for m in e], native_enum=False),
        default=TaskPriority.MEDIUM,
        nullable=False,
    )
    due_date = Column(DateTime, nullable=False)
    assignee_id = Column(String(255), nullable=True)
    creator_id = Column(String(255), nullable=False)

    tags = Column(JSON, default=list, nullable=False)
    attachments = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    project = relationship("Project", back_populates="tasks")
    comments = relationship(
        "Comment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )

    def __repr__(self):
        return f"<Task {self.title} ({self.status})>"


class Comment(Base):
    """Comment on a task. Never edited."""
    __tablename__ = "comments"

    __table_args__ = (
        Index('ix_comments_task_id', 'task_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    task_id = Column(GUID, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    task = relationship("Task", back_populates="comments")

    def __repr__(self):
        return f"<Comment {self.id} on {self.task_id}>"
