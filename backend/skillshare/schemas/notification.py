from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_serializer

from skillshare.models.notification import NotificationType
from skillshare.schemas.common import serialize_datetime


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    message: str
    type: NotificationType
    is_read: bool
    created_at: datetime | None = None
    related_id: UUID | None = None
    related_type: str | None = None

    @field_serializer("created_at")
    def serialize_created_at(self, dt: datetime | None) -> str | None:
        return serialize_datetime(dt)


class MarkAllReadResponse(BaseModel):
    message: str
    updated: int
