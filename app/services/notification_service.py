"""User-visible notifications."""
import logging
from collections import deque
from typing import Deque, List, Optional

from app.config import settings
from app.localization.helpers import get_translation
from app.schemas.notification import Notification, NotificationCode, NotificationLevel

logger = logging.getLogger(__name__)


class NotificationService:
    """Queue of notifications waiting to be shown to the user.

    Older entries are dropped once ``max_pending`` is reached.
    """

    def __init__(self, locale: Optional[str] = None, max_pending: int = 100):
        self.locale = locale or settings.LOCALE
        self._pending: Deque[Notification] = deque(maxlen=max_pending)
        self._latest: Optional[Notification] = None

    def notify(
        self,
        level: NotificationLevel,
        key: str,
        code: Optional[NotificationCode] = None,
        **kwargs,
    ) -> Notification:
        notification = Notification(
            level=level,
            message=get_translation(key, self.locale, **kwargs),
            code=code,
        )
        self._pending.append(notification)
        self._latest = notification
        logger.debug(f"Notification [{level.value}] {notification.message}")
        return notification

    def success(self, key: str, **kwargs) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, key, **kwargs)

    def error(self, key: str, code: NotificationCode = NotificationCode.REMOTE, **kwargs) -> Notification:
        return self.notify(NotificationLevel.ERROR, key, code=code, **kwargs)

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    @property
    def latest(self) -> Optional[Notification]:
        """Most recent notification, kept after the queue is drained."""
        return self._latest

    def drain(self) -> List[Notification]:
        drained = list(self._pending)
        self._pending.clear()
        return drained
