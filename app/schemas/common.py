"""Common schemas."""
from typing import Any, Dict, List
from pydantic import BaseModel, Field

from app.schemas.record import FieldError


class PagingInfo(BaseModel):
    """Pagination parameters."""

    limit: int = 50
    offset: int = 0


class FetchResult(BaseModel):
    """Records returned by a repository fetch, with the store's total."""

    records: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0


class RecordFailure(BaseModel):
    """An input record the store rejected during a bulk write."""

    index: int
    record: Dict[str, Any]
    message: str = ""
    errors: List[FieldError] = Field(default_factory=list)


class WriteResult(BaseModel):
    """Successfully written records plus the inputs that failed."""

    records: List[Dict[str, Any]] = Field(default_factory=list)
    failures: List[RecordFailure] = Field(default_factory=list)

    @property
    def first(self) -> Dict[str, Any]:
        return self.records[0]
