from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from skillshare.schemas.common import serialize_datetime


class FeedbackRequest(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str = ""


class FeedbackResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    session_id: UUID
    user_id: UUID
    rating: int
    comment: str
    created_at: datetime | None = None

    @field_serializer("created_at")
    def serialize_created_at(self, dt: datetime | None) -> str | None:
        return serialize_datetime(dt)
