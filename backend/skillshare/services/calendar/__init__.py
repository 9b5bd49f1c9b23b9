from skillshare.services.calendar.ics import build_session_calendar, ics_filename, CONTENT_TYPE

__all__ = ["build_session_calendar", "ics_filename", "CONTENT_TYPE"]
