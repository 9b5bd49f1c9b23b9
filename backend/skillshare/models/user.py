# backend/skillshare/models/user.py
import enum
from uuid import UUID, uuid4
from sqlalchemy import String, Text, Enum, Float, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from skillshare.models.base import Base, TimestampMixin, enum_values


class UserRole(str, enum.Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


PRIVILEGED_ROLES = frozenset({UserRole.MODERATOR, UserRole.ADMIN})


class User(Base, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("oauth_provider", "oauth_id", name="uq_users_oauth_identity"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    bio: Mapped[str | None] = mapped_column(Text)
    skills: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    average_rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=enum_values),
        default=UserRole.USER,
        nullable=False,
    )

    # Credentials: a password, an OAuth identity, or both after linking
    password_hash: Mapped[str | None] = mapped_column(String(255))
    oauth_provider: Mapped[str | None] = mapped_column(String(50))
    oauth_id: Mapped[str | None] = mapped_column(String(255))

    # SHA-256 of the single active refresh token; newest login wins
    refresh_token_hash: Mapped[str | None] = mapped_column(String(64), index=True)

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)
