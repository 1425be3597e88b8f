"""Custom exceptions."""
from typing import Optional
from fastapi import HTTPException, status
from app.localization.helpers import get_translation


class TaskboardError(Exception):
    """Base class for errors raised below the HTTP layer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(TaskboardError):
    """The record store call itself failed (network, status code, malformed body)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FetchError(TaskboardError):
    """A repository operation could not be completed.

    ``message`` is safe to show to the user; the underlying cause is chained.
    """


class ValidationError(TaskboardError):
    """Client-side validation failed before anything was sent."""


class NotFoundError(HTTPException):
    """Resource not found exception."""

    def __init__(self, detail: Optional[str] = None, locale: str = "en"):
        if detail is None:
            detail = get_translation("errors.resource_not_found", locale)
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UnauthorizedError(HTTPException):
    """Unauthorized exception."""

    def __init__(self, detail: Optional[str] = None, locale: str = "en"):
        if detail is None:
            detail = get_translation("errors.not_authenticated", locale)
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class UnprocessableError(HTTPException):
    """Validation exception."""

    def __init__(self, detail: Optional[str] = None, locale: str = "en"):
        if detail is None:
            detail = get_translation("errors.validation_error", locale)
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class UpstreamError(HTTPException):
    """Record store failure surfaced over HTTP."""

    def __init__(self, detail: Optional[str] = None, locale: str = "en"):
        if detail is None:
            detail = get_translation("errors.upstream_failure", locale)
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
