"""FastAPI dependencies for the board and the authentication session."""
from typing import NoReturn
from fastapi import Depends, Request
from app.core.exceptions import NotFoundError, UnauthorizedError, UnprocessableError, UpstreamError
from app.schemas.notification import NotificationCode
from app.services.auth_service import AuthSession
from app.services.board_service import TaskBoard
from app.services.notification_service import NotificationService


def get_auth_session(request: Request) -> AuthSession:
    """Authentication session created at start-up."""
    return request.app.state.auth_session


def get_notifier(request: Request) -> NotificationService:
    return request.app.state.notifier


def get_board(request: Request) -> TaskBoard:
    return request.app.state.board


async def require_authenticated_board(
    board: TaskBoard = Depends(get_board),
    auth: AuthSession = Depends(get_auth_session),
) -> TaskBoard:
    """Board access for signed-in users only."""
    if not auth.is_authenticated:
        raise UnauthorizedError()
    return board


def raise_board_failure(board: TaskBoard) -> NoReturn:
    """Translate the board's last error notification into an HTTP error."""
    notification = board.notifier.latest
    detail = notification.message if notification else None
    code = notification.code if notification else None
    if code == NotificationCode.VALIDATION:
        raise UnprocessableError(detail)
    if code == NotificationCode.NOT_FOUND:
        raise NotFoundError(detail)
    raise UpstreamError(detail)
