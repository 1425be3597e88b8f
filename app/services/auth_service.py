"""Authentication session and post-login navigation."""
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from app.schemas.auth import AuthUser

logger = logging.getLogger(__name__)

AUTH_PAGES = ("/login", "/signup", "/callback", "/error")
HOME_PATH = "/"
LOGIN_PATH = "/login"


class AuthState(str, Enum):
    """Authentication session states."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    AUTH_FAILED = "auth_failed"


AuthListener = Callable[[AuthState, AuthState], Awaitable[None]]


def is_auth_page(current_path: str) -> bool:
    return any(page in current_path for page in AUTH_PAGES)


def split_location(location: str) -> Tuple[str, Optional[str]]:
    """Current path (path plus query string) and the ``redirect`` query target."""
    parts = urlsplit(location or HOME_PATH)
    path = parts.path or HOME_PATH
    current_path = f"{path}?{parts.query}" if parts.query else path
    redirect = parse_qs(parts.query).get("redirect")
    return current_path, (redirect[0] if redirect else None)


def resolve_redirect(current_path: str, redirect_target: Optional[str], authenticated: bool) -> str:
    """Where to navigate after the identity provider reports back.

    ==============  ===============  ============  ===================
    authenticated   redirect target  on auth page  destination
    ==============  ===============  ============  ===================
    yes             present          any           redirect target
    yes             absent           no            current path
    yes             absent           yes           ``/``
    no              any              no            ``/login``
    no              any              yes           current path
    ==============  ===============  ============  ===================
    """
    on_auth_page = is_auth_page(current_path)
    if authenticated:
        if redirect_target:
            return redirect_target
        return HOME_PATH if on_auth_page else current_path
    return current_path if on_auth_page else LOGIN_PATH


class AuthSession:
    """Authentication state machine for the current user.

    Listeners receive ``(previous, current)`` after every state change.
    """

    def __init__(self):
        self.state = AuthState.UNAUTHENTICATED
        self.user: Optional[AuthUser] = None
        self.last_error: Optional[str] = None
        self._listeners: List[AuthListener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    @property
    def display_name(self) -> Optional[str]:
        return self.user.display_name if self.user else None

    @property
    def email_address(self) -> str:
        return self.user.email_address if self.user else ""

    def on_change(self, listener: AuthListener) -> None:
        self._listeners.append(listener)

    async def _transition(self, new_state: AuthState) -> None:
        previous = self.state
        self.state = new_state
        if previous == new_state:
            return
        logger.info(f"Auth state {previous.value} -> {new_state.value}")
        for listener in self._listeners:
            await listener(previous, new_state)

    async def begin(self) -> None:
        """Identity provider flow started."""
        if self.state != AuthState.AUTHENTICATED:
            await self._transition(AuthState.AUTHENTICATING)

    async def complete(self, user_data: Optional[Dict[str, Any]], location: str = HOME_PATH) -> str:
        """Apply the provider's success callback; returns the navigation target."""
        current_path, redirect_target = split_location(location)
        if user_data:
            self.user = AuthUser.model_validate(user_data)
            self.last_error = None
            await self._transition(AuthState.AUTHENTICATED)
        else:
            self.user = None
            await self._transition(AuthState.UNAUTHENTICATED)
        return resolve_redirect(current_path, redirect_target, self.is_authenticated)

    async def fail(self, error: str = "") -> None:
        """Apply the provider's error callback."""
        logger.error(f"Authentication failed: {error}")
        self.user = None
        self.last_error = error or None
        await self._transition(AuthState.AUTH_FAILED)

    async def logout(self) -> str:
        self.user = None
        await self._transition(AuthState.UNAUTHENTICATED)
        return LOGIN_PATH
