"""Scheduler for periodic session reminders."""
import asyncio
import logging
from datetime import datetime, timedelta

from skillshare.core.config import settings
from skillshare.core.errors import StoreError
from skillshare.core.database import async_session_factory
from skillshare.models.notification import NotificationType
from skillshare.services.notifications.store import NotificationStore
from skillshare.services.sessions.registry import SessionRegistry

logger = logging.getLogger(__name__)


def format_start_time(dt: datetime) -> str:
    """e.g. "Jan 2, 2006 at 3:04 PM"."""
    hour = dt.hour % 12 or 12
    return f"{dt.strftime('%b')} {dt.day}, {dt.year} at {hour}:{dt.minute:02d} {dt.strftime('%p')}"


def reminder_message(title: str, starts_at: datetime) -> str:
    return f"Reminder: Your session '{title}' is starting on {format_start_time(starts_at)}."


class ReminderScheduler:
    """Periodically notifies participants of sessions that start soon."""

    def __init__(self, session_factory=None):
        self.running = False
        self.interval_minutes = settings.reminder_interval_minutes
        self.horizon = timedelta(hours=settings.reminder_horizon_hours)
        self.session_factory = session_factory or async_session_factory

    async def start(self) -> None:
        """Start the scheduler loop."""
        self.running = True
        logger.info(
            f"Reminder scheduler started (interval: {self.interval_minutes} minutes, "
            f"horizon: {self.horizon})"
        )

        while self.running:
            try:
                await self.run_once()
            except Exception as e:
                logger.exception(f"Error in reminder sweep: {e}")

            # Sleep in 1-second intervals for responsive shutdown
            sleep_seconds = self.interval_minutes * 60
            for _ in range(sleep_seconds):
                if not self.running:
                    break
                await asyncio.sleep(1)

    async def run_once(self, now: datetime | None = None) -> int:
        """Send reminders for sessions inside the horizon. Returns how many were sent."""
        sent = 0
        async with self.session_factory() as db:
            registry = SessionRegistry(db)
            notifications = NotificationStore(db)

            upcoming = await registry.starting_soon(self.horizon, now=now)
            if not upcoming:
                return 0
            logger.info(f"Found {len(upcoming)} sessions starting within {self.horizon}")

            for session in upcoming:
                try:
                    participants = await registry.list_participants(session.id)
                except StoreError as e:
                    logger.warning(f"Skipping reminders for session {session.id}: {e.message}")
                    continue

                message = reminder_message(session.title, session.date_time)
                for participant in participants:
                    try:
                        await notifications.create_notification(
                            user_id=participant.id,
                            message=message,
                            type=NotificationType.SESSION_REMINDER,
                            related_id=session.id,
                            related_type="session",
                        )
                    except StoreError as e:
                        logger.warning(
                            f"Reminder for user {participant.id} about session {session.id} failed: {e.message}"
                        )
                        continue
                    sent += 1

        if sent:
            logger.info(f"Sent {sent} session reminders")
        return sent

    def stop(self) -> None:
        """Stop the scheduler loop."""
        self.running = False
        logger.info("Reminder scheduler stopped")
