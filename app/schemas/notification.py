"""Notification schemas."""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.utils.dates import utcnow


class NotificationLevel(str, Enum):
    """Notification severity."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class NotificationCode(str, Enum):
    """Machine-readable reason attached to error notifications."""

    VALIDATION = "validation_error"
    REMOTE = "remote_error"
    NOT_FOUND = "not_found"
    AUTH = "auth_error"


class Notification(BaseModel):
    """User-visible notification."""

    level: NotificationLevel
    message: str
    code: Optional[NotificationCode] = None
    created_at: datetime = Field(default_factory=utcnow)
