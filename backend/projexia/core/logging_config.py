"""
Projexia - Logging

One logger, ``projexia``, shared by the API and the services. Each record
carries the ids of the request being served (request, signed-in user,
project in the URL) so a project's history can be pulled out of the logs.

Development prints readable lines; production prints one JSON object per
line. ``LOG_FILE`` adds a rotating file in the same format, with the
development variant showing the full context.

Usage:
    from projexia.core.logging_config import logger

    logger.log_project_event("Invited member to project", project_id, email=email)
    logger.log_auth_event("login", success=False, user_email=email, reason="password mismatch")
"""

import json
import logging
import sys
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

from projexia.core.config import settings


LOGGER_NAME = "projexia"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024

# Third-party loggers that drown out request logs below WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine")

_request_id: ContextVar[str] = ContextVar("request_id", default="")
_user_id: ContextVar[str] = ContextVar("user_id", default="")
_project_id: ContextVar[str] = ContextVar("project_id", default="")

_CONTEXT = {
    "request_id": _request_id,
    "user_id": _user_id,
    "project_id": _project_id,
}

# Attributes every LogRecord has; anything else came in through `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def get_request_id() -> str:
    return _request_id.get()


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_user_id() -> str:
    return _user_id.get()


def set_user_id(user_id: str) -> None:
    _user_id.set(user_id)


def get_project_id() -> str:
    return _project_id.get()


def set_project_id(project_id: str) -> None:
    _project_id.set(project_id)


def log_context() -> Dict[str, str]:
    """Context ids that are currently set"""
    return {name: var.get() for name, var in _CONTEXT.items() if var.get()}


def generate_request_id() -> str:
    """Short id for X-Request-ID"""
    return uuid.uuid4().hex[:8]


class JSONFormatter(logging.Formatter):
    """One JSON object per record: core fields, context ids, then extras"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(log_context())

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                entry.setdefault(key, value)

        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Plain-text formatter; `%(request_id)s`, `%(user_id)s`, `%(project_id)s` show '-' when unset"""

    def format(self, record: logging.LogRecord) -> str:
        context = log_context()
        for name in _CONTEXT:
            setattr(record, name, context.get(name, "-"))
        return super().format(record)


class ProjexiaLogger(logging.Logger):
    """Logger with one helper per kind of domain event the services emit"""

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **details) -> None:
        """Signup, login and Google sign-in outcomes. Failures log at WARNING."""
        parts = [f"Auth {event}: {'success' if success else 'failed'}"]
        if user_email:
            parts.append(user_email)
        if reason:
            parts.append(reason)

        self.log(
            logging.INFO if success else logging.WARNING,
            " - ".join(parts),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "failure_reason": reason,
                **details,
            },
        )

    def log_project_event(self, action: str, project_id: str, level: int = logging.INFO, **details) -> None:
        """Something happened to a project, its members or its chat"""
        suffix = ", ".join(f"{key}={value}" for key, value in details.items())
        self.log(
            level,
            f"[Projects] {action} {project_id}" + (f" ({suffix})" if suffix else ""),
            extra={"event_type": "project", "project_action": action, "event_project_id": str(project_id), **details},
        )

    def log_task_event(self, action: str, task_id: str, project_id: str, **details) -> None:
        """Something happened to a task or its comments"""
        self.info(
            f"[Tasks] {action} {task_id} in project {project_id}",
            extra={
                "event_type": "task",
                "task_action": action,
                "task_id": str(task_id),
                "event_project_id": str(project_id),
                **details,
            },
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None, **details) -> None:
        """Error with traceback, tagged with where it happened"""
        self.error(
            f"Error in {context}: {type(error).__name__}: {error}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **details,
            },
        )


def _build_handlers(json_logs: bool) -> List[logging.Handler]:
    console_formatter: logging.Formatter
    if json_logs:
        console_formatter = file_formatter = JSONFormatter()
    else:
        console_formatter = ContextualFormatter("%(levelname)-8s | %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] [%(project_id)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(console_formatter)
    handlers: List[logging.Handler] = [console]

    if settings.LOG_FILE:
        path = Path(settings.LOG_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=10 if json_logs else 5)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    return handlers


def setup_logging() -> ProjexiaLogger:
    """Configure the `projexia` logger for the current environment"""
    logging.setLoggerClass(ProjexiaLogger)
    logger = logging.getLogger(LOGGER_NAME)
    logger.__class__ = ProjexiaLogger  # may have been created before the class was registered
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    json_logs = settings.ENVIRONMENT == "production"
    logger.handlers.clear()
    for handler in _build_handlers(json_logs):
        logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug("Logging initialized", extra={"environment": settings.ENVIRONMENT, "json_logging": json_logs})
    return logger


logger: ProjexiaLogger = setup_logging()


__all__ = [
    "logger",
    "setup_logging",
    "log_context",
    "get_request_id",
    "set_request_id",
    "get_user_id",
    "set_user_id",
    "get_project_id",
    "set_project_id",
    "generate_request_id",
    "JSONFormatter",
    "ContextualFormatter",
    "ProjexiaLogger",
]
