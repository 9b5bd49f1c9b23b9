import logging
from uuid import UUID

from sqlalchemy import select, update

from skillshare.core.errors import StoreError, StoreErrorKind
from skillshare.models.notification import Notification, NotificationType
from skillshare.services.base import Store

logger = logging.getLogger(__name__)

DEFAULT_UNREAD_LIMIT = 10


class NotificationStore(Store):
    """In-app notifications. Rows are only ever marked read, never deleted."""

    async def create_notification(
        self,
        user_id: UUID,
        message: str,
        type: NotificationType,
        related_id: UUID | None = None,
        related_type: str | None = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            message=message,
            type=type,
            is_read=False,
            related_id=related_id,
            related_type=related_type,
        )
        self.session.add(notification)
        await self._commit()
        return notification

    async def list_unread(self, user_id: UUID, limit: int = DEFAULT_UNREAD_LIMIT) -> list[Notification]:
        result = await self._execute(
            select(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .order_by(Notification.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> None:
        """Mark one notification read; the recipient has to match."""
        result = await self._execute(
            update(Notification)
            .where(Notification.id == notification_id, Notification.user_id == user_id)
            .values(is_read=True)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            raise StoreError(StoreErrorKind.NOT_FOUND, "Notification not found")
        await self._commit()

    async def mark_all_read(self, user_id: UUID) -> int:
        result = await self._execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        await self._commit()
        return result.rowcount
