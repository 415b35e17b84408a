"""
Custom Exceptions for Projexia
==============================

Services raise these; the handlers registered in ``projexia.main`` turn them
into ``{"message": ..., "error": ...}`` JSON bodies with the matching status.

Usage:
    from projexia.core.exceptions import ProjectNotFoundError, ValidationError

    if not project:
        raise ProjectNotFoundError(project_id)

    if not data.title:
        raise ValidationError("title is required", field="title")
"""

from typing import Optional, Any, Dict


class ProjexiaError(Exception):
    """Base exception for all Projexia errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.details:
            body["error"] = self.details
        return body


# ============================================
# Validation & Authentication Errors (400)
# ============================================

class ValidationError(ProjexiaError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class AuthError(ProjexiaError):
    """Bad credentials. The message never says which half was wrong."""

    status_code = 400

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="AUTH_FAILED")


class ConflictError(ProjexiaError):
    """Resource already exists"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


# ============================================
# Authorization Errors (403)
# ============================================

class ForbiddenError(ProjexiaError):
    """Caller does not own the resource"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404)
# ============================================

class NotFoundError(ProjexiaError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Optional[str] = None):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: Optional[str] = None):
        super().__init__("Project", project_id)


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: Optional[str] = None):
        super().__init__("Task", task_id)


class MemberNotFoundError(NotFoundError):
    def __init__(self, member_id: Optional[str] = None):
        super().__init__("Member", member_id)


class CommentNotFoundError(NotFoundError):
    def __init__(self, comment_id: Optional[str] = None):
        super().__init__("Comment", comment_id)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: Optional[str] = None):
        super().__init__("User", user_id)


# ============================================
# Server Errors (500)
# ============================================

class ServerError(ProjexiaError):
    """Unexpected failure talking to the database or a provider"""

    status_code = 500

    def __init__(self, message: str = "Server error", error: Optional[Exception] = None):
        details = {"reason": str(error)} if error else {}
        super().__init__(message, code="SERVER_ERROR", details=details)


def error_response(error: ProjexiaError) -> Dict[str, Any]:
    """Convert exception to the JSON body sent to clients"""
    return error.to_dict()
