from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from skillshare.schemas.common import serialize_datetime


def assume_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class SessionRequest(BaseModel):
    """Body for creating or replacing a session."""
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    category: str = Field(min_length=1, max_length=100)
    date_time: datetime
    location: str = Field(min_length=1, max_length=255)
    max_participants: int = Field(ge=1)

    @field_validator("title", "category", "location")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("date_time")
    @classmethod
    def normalize_date_time(cls, value: datetime) -> datetime:
        return assume_utc(value)


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    category: str
    date_time: datetime
    location: str
    max_participants: int
    creator_id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_serializer("date_time", "created_at", "updated_at")
    def serialize_datetimes(self, dt: datetime | None) -> str | None:
        return serialize_datetime(dt)
