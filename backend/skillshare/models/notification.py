"""Per-user notification model."""
import enum
from uuid import UUID, uuid4
from datetime import datetime
from sqlalchemy import String, Text, Enum, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column
from skillshare.models.base import Base, enum_values


class NotificationType(str, enum.Enum):
    """Events that produce a notification."""
    NEW_PARTICIPANT = "new_participant"
    SESSION_REMINDER = "session_reminder"
    SESSION_UPDATE = "session_update"


class Notification(Base):
    """A message queued for a single recipient."""
    __tablename__ = "notifications"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, name="notification_type", values_callable=enum_values),
        nullable=False,
    )
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    related_id: Mapped[UUID | None] = mapped_column(nullable=True)
    related_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
