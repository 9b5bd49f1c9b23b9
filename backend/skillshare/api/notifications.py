# backend/skillshare/api/notifications.py
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from skillshare.core.deps import Identity, get_current_identity, get_notification_store
from skillshare.schemas.common import MessageResponse
from skillshare.schemas.notification import MarkAllReadResponse, NotificationResponse
from skillshare.services.notifications.store import DEFAULT_UNREAD_LIMIT, NotificationStore

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/unread", response_model=list[NotificationResponse])
async def list_unread(
    limit: int = Query(default=DEFAULT_UNREAD_LIMIT, ge=1, le=50),
    identity: Identity = Depends(get_current_identity),
    notifications: NotificationStore = Depends(get_notification_store),
):
    """Most recent unread notifications, newest first."""
    return await notifications.list_unread(identity.user_id, limit=limit)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    identity: Identity = Depends(get_current_identity),
    notifications: NotificationStore = Depends(get_notification_store),
) -> MarkAllReadResponse:
    updated = await notifications.mark_all_read(identity.user_id)
    return MarkAllReadResponse(message="All notifications marked as read", updated=updated)


@router.post("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: UUID,
    identity: Identity = Depends(get_current_identity),
    notifications: NotificationStore = Depends(get_notification_store),
) -> MessageResponse:
    await notifications.mark_read(notification_id, identity.user_id)
    return MessageResponse(message="Notification marked as read")
