from skillshare.models.base import Base, TimestampMixin
from skillshare.models.user import User, UserRole, PRIVILEGED_ROLES
from skillshare.models.session import Session, SessionParticipant
from skillshare.models.feedback import Feedback
from skillshare.models.notification import Notification, NotificationType

__all__ = [
    "Base", "TimestampMixin",
    "User", "UserRole", "PRIVILEGED_ROLES",
    "Session", "SessionParticipant",
    "Feedback",
    "Notification", "NotificationType",
]
