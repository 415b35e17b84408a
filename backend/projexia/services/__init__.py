from projexia.services.auth_service import AuthService
from projexia.services.project_service import ProjectService
from projexia.services.task_service import TaskService
from projexia.services.comment_service import CommentService

__all__ = ["AuthService", "ProjectService", "TaskService", "CommentService"]
