from skillshare.services.notifications.store import NotificationStore

__all__ = ["NotificationStore"]
