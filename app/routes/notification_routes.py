from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.models.user_model import User
from app.schemas.notification_schemas import NotificationOut, MarkAllReadOut
from app.storage import Storage, get_storage
from app.utils.token_utils import get_current_user

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationOut])
async def list_notifications(
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    # newest first
    return [NotificationOut.from_model(n) for n in await storage.get_notifications_by_user(user.id)]


@router.put("", response_model=MarkAllReadOut)
async def mark_all_read(
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    updated = await storage.mark_all_notifications_as_read(user.id)
    await storage.commit()
    return MarkAllReadOut(updated=updated)


@router.put("/{notification_id}/read", response_model=NotificationOut)
async def mark_read(
    notification_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    notification = await storage.get_notification(notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    # Check if notification belongs to user
    if notification.user_id != user.id:
        raise HTTPException(status_code=403, detail="Unauthorized to update this notification")

    updated = await storage.mark_notification_as_read(notification_id)
    await storage.commit()
    return NotificationOut.from_model(updated)
