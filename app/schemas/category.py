"""Category schemas."""
from typing import Any, Dict, Optional
from pydantic import BaseModel

from app.config import settings


class Category(BaseModel):
    """Category view model. ``task_count`` is derived and never sent to the store."""

    id: str
    name: str = ""
    color: str = "#6366f1"
    task_count: int = 0

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Category":
        raw_id = record.get("Id") or record.get("id")
        return cls(
            id=str(raw_id) if raw_id is not None else "",
            name=record.get("Name") or "",
            color=record.get("color") or settings.DEFAULT_CATEGORY_COLOR,
            task_count=0,
        )


class CategoryCreate(BaseModel):
    """Category creation schema."""

    name: str
    color: Optional[str] = None

    def to_record(self, owner: str = "") -> Dict[str, Any]:
        return {
            "Name": self.name.strip(),
            "color": self.color or settings.DEFAULT_CATEGORY_COLOR,
            "Owner": owner,
        }
