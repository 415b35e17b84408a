# Re-export all models for convenient imports
from projexia.models.user import User, UserRole
from projexia.models.project import Project, ProjectMember, MemberRole, ChatMessage
from projexia.models.task import Task, TaskStatus, TaskPriority, Comment

__all__ = [
    # User
    "User",
    "UserRole",
    # Project
    "Project",
    "ProjectMember",
    "MemberRole",
    "ChatMessage",
    # Task
    "Task",
    "TaskStatus",
    "TaskPriority",
    "Comment",
]
