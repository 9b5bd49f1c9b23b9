#!/usr/bin/env python3
"""Standalone reminder scheduler for systemd service."""
import asyncio
import logging
import signal

from skillshare.core.config import settings
from skillshare.services.reminders.scheduler import ReminderScheduler


async def main():
    scheduler = ReminderScheduler()

    # Handle graceful shutdown
    def shutdown_handler(sig, frame):
        scheduler.stop()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    await scheduler.start()


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    asyncio.run(main())
