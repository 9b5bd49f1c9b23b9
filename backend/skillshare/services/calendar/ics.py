"""iCalendar export of a single session."""
from datetime import datetime, timedelta, timezone

from icalendar import Calendar, Event

from skillshare.core.config import settings
from skillshare.models.session import Session

PRODID = "-//SkillShare//Sessions//EN"
CONTENT_TYPE = "text/calendar; charset=utf-8"


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def session_url(session: Session) -> str:
    return f"{settings.frontend_url.rstrip('/')}/sessions/{session.id}"


def ics_filename(session: Session) -> str:
    return f"session-{session.id}.ics"


def build_session_calendar(session: Session, now: datetime | None = None) -> bytes:
    """Serialize a session as a VCALENDAR (METHOD:REQUEST) with one VEVENT."""
    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("method", "REQUEST")

    start = _utc(session.date_time)
    event = Event()
    event.add("uid", str(session.id))
    event.add("dtstamp", _utc(now or datetime.now(timezone.utc)))
    event.add("dtstart", start)
    event.add("dtend", start + timedelta(minutes=settings.session_duration_minutes))
    event.add("summary", session.title)
    event.add("location", session.location)
    event.add("description", session.description or "")
    event.add("url", session_url(session))
    if session.created_at is not None:
        event.add("created", _utc(session.created_at))
    if session.updated_at is not None:
        event.add("last-modified", _utc(session.updated_at))

    cal.add_component(event)
    return cal.to_ical()
