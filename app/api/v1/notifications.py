"""Notifications API endpoints."""
from typing import List
from fastapi import APIRouter, Depends
from app.dependencies import get_notifier
from app.schemas.notification import Notification
from app.services.notification_service import NotificationService

router = APIRouter()


@router.get("", response_model=List[Notification])
async def drain_notifications(notifier: NotificationService = Depends(get_notifier)):
    """Return and clear notifications waiting to be shown."""
    return notifier.drain()
