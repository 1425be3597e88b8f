"""Task CRUD operations."""
from typing import Any, Dict

from app.crud.base import CRUDRemoteBase
from app.schemas.task import TaskPriority, completion_to_wire
from app.utils.dates import utcnow_iso

TASK_FIELDS = (
    "Name", "Tags", "Owner", "CreatedOn", "CreatedBy", "ModifiedOn", "ModifiedBy",
    "title", "description", "due_date", "priority", "is_completed",
    "created_at", "updated_at", "category",
)

TASK_UPDATEABLE_FIELDS = (
    "Name", "Tags", "Owner", "title", "description", "due_date",
    "priority", "is_completed", "created_at", "updated_at", "category",
)


class CRUDTask(CRUDRemoteBase):
    """CRUD operations for the tasks table."""

    entity = "tasks"
    fields = TASK_FIELDS
    updateable_fields = TASK_UPDATEABLE_FIELDS
    order_by = ({"fieldName": "created_at", "SortType": "DESC"},)

    def format_field(self, field: str, value: Any) -> Any:
        if field == "priority":
            return TaskPriority.coerce(value).value
        if field == "is_completed":
            return completion_to_wire(value)
        if field in ("created_at", "updated_at"):
            return value or utcnow_iso()
        if field == "due_date" and hasattr(value, "isoformat"):
            return value.isoformat()
        return value

    def complete_record(self, record: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        if creating:
            record.setdefault("priority", TaskPriority.MEDIUM.value)
            now = utcnow_iso()
            record.setdefault("created_at", now)
            record.setdefault("updated_at", now)
        else:
            record.setdefault("updated_at", utcnow_iso())
        return record

    def search_params(self, term: str) -> Dict[str, Any]:
        return {
            "whereGroups": [
                {
                    "operator": "OR",
                    "subGroups": [
                        {
                            "conditions": [
                                {"fieldName": "title", "operator": "Contains", "values": [term]}
                            ],
                            "operator": "",
                        },
                        {
                            "conditions": [
                                {"fieldName": "description", "operator": "Contains", "values": [term]}
                            ],
                            "operator": "",
                        },
                    ],
                }
            ]
        }
