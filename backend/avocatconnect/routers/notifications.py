# notifications router — the caller's own notification feed

import logging

from fastapi import APIRouter, Depends

from avocatconnect.errors import NotFound
from avocatconnect.models.invoice import NotificationResponse, notification_from_doc
from avocatconnect.services.notification_service import NotificationEmitter
from avocatconnect.dependencies import get_current_user, get_notifier

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: dict = Depends(get_current_user),
    notifier: NotificationEmitter = Depends(get_notifier),
):
    docs = await notifier.list_for_user(current_user["id"])
    return [notification_from_doc(d) for d in docs]


@router.post("/read-all")
async def mark_all_read(
    current_user: dict = Depends(get_current_user),
    notifier: NotificationEmitter = Depends(get_notifier),
):
    updated = await notifier.mark_all_read(current_user["id"])
    return {"updated": updated}


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    current_user: dict = Depends(get_current_user),
    notifier: NotificationEmitter = Depends(get_notifier),
):
    """mark one of the caller's notifications as read"""
    if not await notifier.mark_read(notification_id, current_user["id"]):
        raise NotFound("Notification not found.")
    return {"id": notification_id, "read": True}
