"""Authentication schemas."""
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """User object handed over by the identity provider."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    user_id: Optional[str] = Field(default=None, alias="userId")
    email_address: str = Field(default="", alias="emailAddress")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.first_name or self.name or "User"


class AuthCallbackRequest(BaseModel):
    """Identity provider callback relayed by the browser."""

    user: Optional[Dict[str, Any]] = None
    location: str = "/"


class AuthErrorRequest(BaseModel):
    """Identity provider failure relayed by the browser."""

    error: str = ""


class AuthStatusResponse(BaseModel):
    """Session state after an authentication event."""

    state: str
    is_authenticated: bool
    display_name: Optional[str] = None
    email_address: Optional[str] = None
    navigate_to: Optional[str] = None
