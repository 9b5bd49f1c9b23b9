from skillshare.schemas.common import MessageResponse, Page, PageMeta
from skillshare.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    RefreshTokenRequest,
    TokenResponse,
)
from skillshare.schemas.user import (
    UserResponse,
    UserProfileUpdate,
    PasswordChangeRequest,
    UserRoleUpdateRequest,
)
from skillshare.schemas.session import SessionRequest, SessionResponse
from skillshare.schemas.feedback import FeedbackRequest, FeedbackResponse
from skillshare.schemas.notification import NotificationResponse, MarkAllReadResponse

__all__ = [
    "MessageResponse",
    "Page",
    "PageMeta",
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "TokenResponse",
    "UserResponse",
    "UserProfileUpdate",
    "PasswordChangeRequest",
    "UserRoleUpdateRequest",
    "SessionRequest",
    "SessionResponse",
    "FeedbackRequest",
    "FeedbackResponse",
    "NotificationResponse",
    "MarkAllReadResponse",
]
