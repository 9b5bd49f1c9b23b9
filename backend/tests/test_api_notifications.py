# backend/tests/test_api_notifications.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from httpx import AsyncClient, ASGITransport

from conftest import bearer
from skillshare.core.errors import StoreError, StoreErrorKind
from skillshare.main import app
from skillshare.models.notification import Notification, NotificationType


async def _request(method: str, path: str, headers: dict | None = None, **kwargs):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, path, headers=headers or {}, **kwargs)


@pytest.mark.asyncio
async def test_list_unread(stores, notification_store):
    user_id = uuid4()
    notification_store.list_unread = AsyncMock(return_value=[
        Notification(
            id=uuid4(),
            user_id=user_id,
            message="Reminder",
            type=NotificationType.SESSION_REMINDER,
            is_read=False,
            related_id=uuid4(),
            related_type="session",
            created_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
        )
    ])

    response = await _request("GET", "/api/notifications/unread", headers=bearer(user_id))

    assert response.status_code == 200
    assert response.json()[0]["type"] == "session_reminder"
    notification_store.list_unread.assert_awaited_once_with(user_id, limit=10)


@pytest.mark.asyncio
async def test_list_unread_custom_limit(stores, notification_store):
    user_id = uuid4()
    notification_store.list_unread = AsyncMock(return_value=[])

    response = await _request("GET", "/api/notifications/unread?limit=25", headers=bearer(user_id))

    assert response.status_code == 200
    notification_store.list_unread.assert_awaited_once_with(user_id, limit=25)


@pytest.mark.asyncio
async def test_list_unread_limit_out_of_range(stores):
    response = await _request("GET", "/api/notifications/unread?limit=51", headers=bearer(uuid4()))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_mark_read(stores, notification_store):
    user_id, notification_id = uuid4(), uuid4()
    notification_store.mark_read = AsyncMock()

    response = await _request("POST", f"/api/notifications/{notification_id}/read", headers=bearer(user_id))

    assert response.status_code == 200
    notification_store.mark_read.assert_awaited_once_with(notification_id, user_id)


@pytest.mark.asyncio
async def test_mark_read_of_someone_elses_notification_is_404(stores, notification_store):
    notification_store.mark_read = AsyncMock(
        side_effect=StoreError(StoreErrorKind.NOT_FOUND, "Notification not found")
    )

    response = await _request("POST", f"/api/notifications/{uuid4()}/read", headers=bearer(uuid4()))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_mark_all_read_reports_count(stores, notification_store):
    notification_store.mark_all_read = AsyncMock(return_value=3)

    response = await _request("POST", "/api/notifications/read-all", headers=bearer(uuid4()))

    assert response.status_code == 200
    assert response.json()["updated"] == 3
