# backend/tests/test_notification_store.py
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from skillshare.core.errors import StoreError, StoreErrorKind
from skillshare.models.notification import Notification, NotificationType
from skillshare.services.notifications.store import NotificationStore


def _mock_db(rowcount=None, scalars=None) -> MagicMock:
    result = MagicMock()
    result.rowcount = rowcount
    result.scalars.return_value.all.return_value = scalars or []
    db = MagicMock(spec=AsyncSession)
    db.execute = AsyncMock(return_value=result)
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


@pytest.mark.asyncio
async def test_create_notification():
    db = _mock_db()
    user_id, session_id = uuid4(), uuid4()

    notification = await NotificationStore(db).create_notification(
        user_id=user_id,
        message="User 'Bob' joined your session 'Go'.",
        type=NotificationType.NEW_PARTICIPANT,
        related_id=session_id,
        related_type="session",
    )

    added = db.add.call_args[0][0]
    assert isinstance(added, Notification)
    assert added is notification
    assert notification.is_read is False
    assert notification.related_id == session_id
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_list_unread_newest_first_with_limit():
    db = _mock_db()

    await NotificationStore(db).list_unread(uuid4(), limit=3)

    statement = db.execute.call_args[0][0]
    sql = str(statement.compile(dialect=postgresql.dialect()))
    assert "notifications.is_read IS false" in sql
    assert "ORDER BY notifications.created_at DESC" in sql
    assert 3 in statement.compile().params.values()


@pytest.mark.asyncio
async def test_mark_read_requires_matching_recipient():
    db = _mock_db(rowcount=0)

    with pytest.raises(StoreError) as exc_info:
        await NotificationStore(db).mark_read(uuid4(), uuid4())

    assert exc_info.value.kind is StoreErrorKind.NOT_FOUND
    db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_mark_read_filters_on_both_ids():
    db = _mock_db(rowcount=1)
    notification_id, user_id = uuid4(), uuid4()

    await NotificationStore(db).mark_read(notification_id, user_id)

    params = db.execute.call_args[0][0].compile().params
    assert notification_id in params.values()
    assert user_id in params.values()
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_mark_all_read_returns_count():
    db = _mock_db(rowcount=7)

    updated = await NotificationStore(db).mark_all_read(uuid4())

    assert updated == 7
    db.commit.assert_awaited_once()
