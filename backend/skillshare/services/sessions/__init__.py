from skillshare.services.sessions.registry import SessionRegistry, SessionSearchFilters

__all__ = ["SessionRegistry", "SessionSearchFilters"]
