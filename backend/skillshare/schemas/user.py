from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from skillshare.models.user import UserRole
from skillshare.schemas.common import serialize_datetime


class UserResponse(BaseModel):
    """Public view of a user; credentials and refresh tokens are never included."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    bio: str | None = None
    skills: list[str] = Field(default_factory=list)
    average_rating: float = 0.0
    role: UserRole
    oauth_provider: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("skills", mode="before")
    @classmethod
    def none_skills_to_empty(cls, value):
        return value or []

    @field_serializer("created_at", "updated_at")
    def serialize_datetimes(self, dt: datetime | None) -> str | None:
        return serialize_datetime(dt)


class UserProfileUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""
    name: str | None = Field(default=None, min_length=1, max_length=255)
    bio: str | None = None
    skills: list[str] | None = None

    @field_validator("skills")
    @classmethod
    def normalize_skills(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return [skill.strip() for skill in value if skill and skill.strip()]


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordChangeRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("confirm_password must match new_password")
        return self


class UserRoleUpdateRequest(BaseModel):
    role: UserRole
