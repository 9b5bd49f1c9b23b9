# backend/skillshare/core/deps.py
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from skillshare.core.database import get_session
from skillshare.core.security import decode_access_token
from skillshare.models.user import UserRole, PRIVILEGED_ROLES
from skillshare.services.feedback.store import FeedbackStore
from skillshare.services.notifications.store import NotificationStore
from skillshare.services.sessions.registry import SessionRegistry
from skillshare.services.users.directory import UserDirectory

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Caller identity taken from a verified access token."""
    user_id: UUID
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES


def identity_from_token(token: str) -> Identity | None:
    payload = decode_access_token(token)
    if not payload:
        return None
    try:
        return Identity(
            user_id=UUID(payload["sub"]),
            email=payload.get("email", ""),
            role=UserRole(payload.get("role", UserRole.USER.value)),
        )
    except (KeyError, ValueError):
        return None


def get_user_directory(db: AsyncSession = Depends(get_session)) -> UserDirectory:
    return UserDirectory(db)


def get_session_registry(db: AsyncSession = Depends(get_session)) -> SessionRegistry:
    return SessionRegistry(db)


def get_feedback_store(db: AsyncSession = Depends(get_session)) -> FeedbackStore:
    return FeedbackStore(db)


def get_notification_store(db: AsyncSession = Depends(get_session)) -> NotificationStore:
    return NotificationStore(db)


async def get_optional_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity | None:
    """Identity for a valid bearer token, None when absent or invalid."""
    if not credentials:
        return None
    return identity_from_token(credentials.credentials)


async def get_current_identity(
    identity: Identity | None = Depends(get_optional_identity),
) -> Identity:
    if not identity:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing authentication",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


async def require_admin(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    if not identity.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return identity


async def require_moderator(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    if not identity.is_privileged:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Moderator access required",
        )
    return identity
