"""Authentication API endpoints."""
from typing import Optional
from fastapi import APIRouter, Depends
from app.dependencies import get_auth_session, get_notifier
from app.schemas.auth import AuthCallbackRequest, AuthErrorRequest, AuthStatusResponse
from app.services.auth_service import AuthSession
from app.services.notification_service import NotificationService
from app.schemas.notification import NotificationCode

router = APIRouter()


def _status(session: AuthSession, navigate_to: Optional[str] = None) -> AuthStatusResponse:
    return AuthStatusResponse(
        state=session.state.value,
        is_authenticated=session.is_authenticated,
        display_name=session.display_name,
        email_address=session.email_address or None,
        navigate_to=navigate_to,
    )


@router.post("/callback", response_model=AuthStatusResponse)
async def auth_callback(
    payload: AuthCallbackRequest,
    session: AuthSession = Depends(get_auth_session),
):
    """Identity provider success callback.

    ``user`` is null when the provider reports no signed-in user. The board is
    loaded when this moves the session into the authenticated state.
    """
    await session.begin()
    navigate_to = await session.complete(payload.user, payload.location)
    return _status(session, navigate_to)


@router.post("/error", response_model=AuthStatusResponse)
async def auth_error(
    payload: AuthErrorRequest,
    session: AuthSession = Depends(get_auth_session),
    notifier: NotificationService = Depends(get_notifier),
):
    """Identity provider error callback."""
    await session.fail(payload.error)
    notifier.error("auth.failed", code=NotificationCode.AUTH)
    return _status(session)


@router.post("/logout", response_model=AuthStatusResponse)
async def logout(session: AuthSession = Depends(get_auth_session)):
    """Sign out and discard the local board."""
    navigate_to = await session.logout()
    return _status(session, navigate_to)


@router.get("/me", response_model=AuthStatusResponse)
async def get_session(session: AuthSession = Depends(get_auth_session)):
    """Current session state."""
    return _status(session)
