"""Record store wire envelopes.

Attribute names mirror the store's JSON so envelopes validate without aliases.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class FieldError(BaseModel):
    """Field-level error reported for a rejected record."""

    fieldLabel: Optional[str] = None
    message: str = ""


class RecordResult(BaseModel):
    """Outcome for a single record inside a mutation response."""

    success: bool
    data: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    errors: Optional[List[FieldError]] = None


class MutationResponse(BaseModel):
    """Envelope returned by create, update and delete."""

    success: bool = False
    message: Optional[str] = None
    results: Optional[List[RecordResult]] = None


class FetchResponse(BaseModel):
    """Envelope returned by fetch."""

    success: bool = True
    data: Optional[List[Dict[str, Any]]] = None
    totalCount: Optional[int] = None


class RecordResponse(BaseModel):
    """Envelope returned by get-by-id."""

    success: bool = True
    data: Optional[Dict[str, Any]] = None
