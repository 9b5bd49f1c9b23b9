from skillshare.services.reminders.scheduler import ReminderScheduler

__all__ = ["ReminderScheduler"]
