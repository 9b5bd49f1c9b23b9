# backend/tests/conftest.py
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from unittest.mock import MagicMock

from skillshare.core import deps
from skillshare.core.security import create_access_token
from skillshare.main import app
from skillshare.models.session import Session
from skillshare.models.user import User, UserRole
from skillshare.services.feedback.store import FeedbackStore
from skillshare.services.notifications.store import NotificationStore
from skillshare.services.sessions.registry import SessionRegistry
from skillshare.services.users.directory import UserDirectory


def bearer(user_id: UUID, role: UserRole = UserRole.USER, email: str = "user@example.com") -> dict:
    token = create_access_token({"sub": str(user_id), "email": email, "role": role.value})
    return {"Authorization": f"Bearer {token}"}


def make_user(**overrides) -> User:
    fields = dict(
        id=uuid4(),
        email="ann@example.com",
        name="Ann",
        bio=None,
        skills=[],
        average_rating=0.0,
        role=UserRole.USER,
        password_hash=None,
        created_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return User(**fields)


def make_session(**overrides) -> Session:
    fields = dict(
        id=uuid4(),
        title="Intro to Go",
        description="Basics",
        category="programming",
        date_time=datetime.now(timezone.utc) + timedelta(days=2),
        location="Room 1",
        max_participants=2,
        creator_id=uuid4(),
        created_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Session(**fields)


@pytest.fixture
def directory():
    return MagicMock(spec=UserDirectory)


@pytest.fixture
def registry():
    return MagicMock(spec=SessionRegistry)


@pytest.fixture
def feedback_store():
    return MagicMock(spec=FeedbackStore)


@pytest.fixture
def notification_store():
    return MagicMock(spec=NotificationStore)


@pytest.fixture
def stores(directory, registry, feedback_store, notification_store):
    """Route every store dependency to a mock for the duration of a test."""
    app.dependency_overrides[deps.get_user_directory] = lambda: directory
    app.dependency_overrides[deps.get_session_registry] = lambda: registry
    app.dependency_overrides[deps.get_feedback_store] = lambda: feedback_store
    app.dependency_overrides[deps.get_notification_store] = lambda: notification_store
    yield
    app.dependency_overrides.clear()
