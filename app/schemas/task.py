"""Task schemas and wire mapping."""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel

from app.utils.dates import parse_date, parse_datetime, utcnow, utcnow_iso

COMPLETED_SENTINEL = "completed"


class TaskPriority(str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def coerce(cls, value: Any) -> "TaskPriority":
        """Known priority or MEDIUM for anything else."""
        try:
            return cls(value)
        except ValueError:
            return cls.MEDIUM


class TaskFilter(str, Enum):
    """Board filter modes."""

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
    TODAY = "today"
    OVERDUE = "overdue"


def completion_to_wire(value: Any) -> str:
    """Encode a completion intent as the store's checkbox sentinel."""
    return COMPLETED_SENTINEL if value else ""


def completion_from_wire(value: Any) -> bool:
    """Completed when the sentinel field is non-empty."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return bool(value)


def lookup_text(value: Any) -> str:
    """Lookup fields arrive either as scalars or as ``{"Id": .., "Name": ..}``."""
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("Id") or value.get("Name") or "")
    return str(value)


def _pick(record: Dict[str, Any], *keys: str) -> Tuple[bool, Any]:
    """First present and truthy wire value among ``keys``; (found, value)."""
    found = False
    for key in keys:
        if key in record:
            found = True
            if record[key]:
                return True, record[key]
    return found, None


class Task(BaseModel):
    """Task view model."""

    id: str
    title: str = ""
    description: str = ""
    due_date: Optional[date] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    category_id: str = ""
    is_completed: bool = False
    created_at: datetime
    updated_at: datetime
    tags: str = ""
    owner: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any], base: Optional["Task"] = None) -> "Task":
        """Map a store record to the view model.

        With ``base``, only fields present in ``record`` replace the base values,
        so partial update responses merge into the existing task.
        """
        values: Dict[str, Any] = base.model_dump() if base else {}

        found, raw_id = _pick(record, "Id", "id")
        if found or not base:
            values["id"] = str(raw_id) if raw_id is not None else ""

        found, title = _pick(record, "title", "Name")
        if found or not base:
            values["title"] = title or ""

        if "description" in record or not base:
            values["description"] = record.get("description") or ""

        if "due_date" in record or not base:
            values["due_date"] = parse_date(record.get("due_date"))

        if "priority" in record or not base:
            values["priority"] = TaskPriority.coerce(record.get("priority"))

        if "category" in record or not base:
            values["category_id"] = lookup_text(record.get("category"))

        if "is_completed" in record or not base:
            values["is_completed"] = completion_from_wire(record.get("is_completed"))

        found, created = _pick(record, "created_at", "CreatedOn")
        if found or not base:
            values["created_at"] = parse_datetime(created) or utcnow()

        found, updated = _pick(record, "updated_at", "ModifiedOn")
        if found or not base:
            values["updated_at"] = parse_datetime(updated) or utcnow()

        if "Tags" in record or not base:
            values["tags"] = record.get("Tags") or ""

        if "Owner" in record or not base:
            owner = record.get("Owner")
            values["owner"] = owner.get("Name", "") if isinstance(owner, dict) else (owner or "")

        return cls(**values)


class TaskForm(BaseModel):
    """Create/edit form state for a task.

    ``priority`` is kept as free text; the repository coerces unknown values.
    """

    title: str = ""
    description: str = ""
    due_date: Optional[date] = None
    priority: str = TaskPriority.MEDIUM.value
    category_id: str = ""

    @classmethod
    def from_task(cls, task: Task) -> "TaskForm":
        return cls(
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            priority=task.priority.value,
            category_id=task.category_id,
        )

    def _common_fields(self) -> Dict[str, Any]:
        return {
            "Name": self.title,
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date.isoformat() if self.due_date else "",
            "priority": self.priority,
            "category": self.category_id,
        }

    def to_create_record(self, owner: str = "") -> Dict[str, Any]:
        now = utcnow_iso()
        return {
            **self._common_fields(),
            "is_completed": False,
            "created_at": now,
            "updated_at": now,
            "Tags": "",
            "Owner": owner,
        }

    def to_update_record(self, task_id: str) -> Dict[str, Any]:
        return {"Id": task_id, **self._common_fields(), "updated_at": utcnow_iso()}


class TaskResponse(Task):
    """Task as returned by the HTTP API, with its category resolved."""

    category_name: Optional[str] = None
    category_color: Optional[str] = None
