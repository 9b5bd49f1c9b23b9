# backend/tests/test_api_sessions.py
"""Tests for /api/sessions endpoints with mocked stores."""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from httpx import AsyncClient, ASGITransport

from conftest import bearer, make_session, make_user
from skillshare.core.errors import StoreError, StoreErrorKind
from skillshare.main import app
from skillshare.models.notification import NotificationType


async def _request(method: str, path: str, headers: dict | None = None, **kwargs):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, path, headers=headers or {}, **kwargs)


def _session_body(**overrides) -> dict:
    body = {
        "title": "Intro to Go",
        "description": "Basics",
        "category": "programming",
        "date_time": (datetime.now(timezone.utc) + timedelta(days=3)).isoformat(),
        "location": "Room 1",
        "max_participants": 4,
    }
    body.update(overrides)
    return body


class TestListSessions:
    """Tests for GET /api/sessions."""

    @pytest.mark.asyncio
    async def test_requires_authentication(self, stores):
        response = await _request("GET", "/api/sessions")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_returns_page_envelope(self, stores, registry):
        sessions = [make_session(), make_session()]
        registry.search_sessions = AsyncMock(return_value=(sessions, 21))

        response = await _request(
            "GET", "/api/sessions?limit=10&page=2&q=go%20intro&category=programming",
            headers=bearer(uuid4()),
        )

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["meta"] == {"total_items": 21, "per_page": 10, "current_page": 2, "total_pages": 3}

        filters = registry.search_sessions.await_args.args[0]
        assert filters.q == "go intro"
        assert filters.category == "programming"
        assert filters.exclude_past is True
        assert registry.search_sessions.await_args.kwargs == {"limit": 10, "page": 2}

    @pytest.mark.asyncio
    async def test_date_filters_and_include_past(self, stores, registry):
        registry.search_sessions = AsyncMock(return_value=([], 0))

        response = await _request(
            "GET",
            "/api/sessions?date_from=2030-01-01T00:00:00&date_to=2030-01-31T23:59:59Z&exclude_past=false",
            headers=bearer(uuid4()),
        )

        assert response.status_code == 200
        filters = registry.search_sessions.await_args.args[0]
        assert filters.date_from == datetime(2030, 1, 1, tzinfo=timezone.utc)
        assert filters.date_to == datetime(2030, 1, 31, 23, 59, 59, tzinfo=timezone.utc)
        assert filters.exclude_past is False
        assert response.json()["meta"]["total_pages"] == 0

    @pytest.mark.asyncio
    async def test_malformed_date_is_400(self, stores, registry):
        registry.search_sessions = AsyncMock()

        response = await _request("GET", "/api/sessions?date_from=next-tuesday", headers=bearer(uuid4()))

        assert response.status_code == 400
        registry.search_sessions.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["limit=0", "limit=101", "page=0"])
    async def test_out_of_range_paging_is_400(self, stores, registry, query):
        response = await _request("GET", f"/api/sessions?{query}", headers=bearer(uuid4()))
        assert response.status_code == 400


class TestOwnListings:
    """Tests for /my, /joined and /recommended."""

    @pytest.mark.asyncio
    async def test_my_sessions(self, stores, registry):
        user_id = uuid4()
        registry.list_created_sessions = AsyncMock(return_value=([make_session(creator_id=user_id)], 1))

        response = await _request("GET", "/api/sessions/my", headers=bearer(user_id))

        assert response.status_code == 200
        assert response.json()["meta"]["total_items"] == 1
        registry.list_created_sessions.assert_awaited_once_with(user_id, limit=10, page=1)

    @pytest.mark.asyncio
    async def test_joined_sessions_include_past_by_default(self, stores, registry):
        user_id = uuid4()
        registry.list_joined_sessions = AsyncMock(return_value=([], 0))

        response = await _request("GET", "/api/sessions/joined?category=music", headers=bearer(user_id))

        assert response.status_code == 200
        registry.list_joined_sessions.assert_awaited_once_with(
            user_id, category="music", exclude_past=False, limit=10, page=1
        )

    @pytest.mark.asyncio
    async def test_recommended_without_token_is_general(self, stores, registry):
        registry.recommended_general = AsyncMock(return_value=[make_session()])
        registry.recommended_for_user = AsyncMock()

        response = await _request("GET", "/api/sessions/recommended")

        assert response.status_code == 200
        assert len(response.json()) == 1
        registry.recommended_general.assert_awaited_once_with(limit=5)
        registry.recommended_for_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recommended_with_invalid_token_is_general(self, stores, registry):
        registry.recommended_general = AsyncMock(return_value=[])

        response = await _request(
            "GET", "/api/sessions/recommended", headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 200
        registry.recommended_general.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_recommended_for_signed_in_user(self, stores, registry, directory):
        user = make_user(skills=["music"])
        directory.get_by_id = AsyncMock(return_value=user)
        registry.recommended_for_user = AsyncMock(return_value=[])

        response = await _request("GET", "/api/sessions/recommended", headers=bearer(user.id))

        assert response.status_code == 200
        registry.recommended_for_user.assert_awaited_once_with(user, limit=5)


class TestSessionCrud:
    """Tests for get/create/update/delete."""

    @pytest.mark.asyncio
    async def test_get_missing_session_is_404(self, stores, registry):
        registry.get_session = AsyncMock(side_effect=StoreError(StoreErrorKind.NOT_FOUND, "Session not found"))

        response = await _request("GET", f"/api/sessions/{uuid4()}", headers=bearer(uuid4()))

        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found"

    @pytest.mark.asyncio
    async def test_get_session_with_invalid_id_is_400(self, stores):
        response = await _request("GET", "/api/sessions/not-a-uuid", headers=bearer(uuid4()))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_session(self, stores, registry):
        user_id = uuid4()
        created = make_session(creator_id=user_id)
        registry.create_session = AsyncMock(return_value=created)

        response = await _request("POST", "/api/sessions", headers=bearer(user_id), json=_session_body())

        assert response.status_code == 201
        assert response.json()["id"] == str(created.id)
        assert registry.create_session.await_args.kwargs["creator_id"] == user_id

    @pytest.mark.asyncio
    async def test_create_in_the_past_is_400(self, stores, registry):
        registry.create_session = AsyncMock()
        past = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()

        response = await _request(
            "POST", "/api/sessions", headers=bearer(uuid4()), json=_session_body(date_time=past)
        )

        assert response.status_code == 400
        registry.create_session.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_with_blank_title_is_400(self, stores):
        response = await _request(
            "POST", "/api/sessions", headers=bearer(uuid4()), json=_session_body(title="  ")
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_by_non_creator_is_403(self, stores, registry):
        registry.get_session = AsyncMock(return_value=make_session())
        registry.update_session = AsyncMock()

        response = await _request(
            "PUT", f"/api/sessions/{uuid4()}", headers=bearer(uuid4()), json=_session_body()
        )

        assert response.status_code == 403
        registry.update_session.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_by_creator(self, stores, registry):
        user_id = uuid4()
        session = make_session(creator_id=user_id)
        registry.get_session = AsyncMock(return_value=session)
        registry.update_session = AsyncMock(return_value=session)

        response = await _request(
            "PUT", f"/api/sessions/{session.id}", headers=bearer(user_id),
            json=_session_body(title="Advanced Go"),
        )

        assert response.status_code == 200
        assert registry.update_session.await_args.kwargs["title"] == "Advanced Go"

    @pytest.mark.asyncio
    async def test_update_keeps_past_date_unchanged(self, stores, registry):
        user_id = uuid4()
        started = datetime(2020, 5, 1, 10, 0, tzinfo=timezone.utc)
        session = make_session(creator_id=user_id, date_time=started)
        registry.get_session = AsyncMock(return_value=session)
        registry.update_session = AsyncMock(return_value=session)

        response = await _request(
            "PUT", f"/api/sessions/{session.id}", headers=bearer(user_id),
            json=_session_body(date_time=started.isoformat(), description="Slides attached"),
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_update_moving_into_past_is_400(self, stores, registry):
        user_id = uuid4()
        session = make_session(creator_id=user_id)
        registry.get_session = AsyncMock(return_value=session)

        response = await _request(
            "PUT", f"/api/sessions/{session.id}", headers=bearer(user_id),
            json=_session_body(date_time="2020-01-01T00:00:00Z"),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_by_non_creator_is_403(self, stores, registry):
        registry.get_session = AsyncMock(return_value=make_session())
        registry.delete_session = AsyncMock()

        response = await _request("DELETE", f"/api/sessions/{uuid4()}", headers=bearer(uuid4()))

        assert response.status_code == 403
        registry.delete_session.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_by_creator(self, stores, registry):
        user_id = uuid4()
        session = make_session(creator_id=user_id)
        registry.get_session = AsyncMock(return_value=session)
        registry.delete_session = AsyncMock()

        response = await _request("DELETE", f"/api/sessions/{session.id}", headers=bearer(user_id))

        assert response.status_code == 200
        assert response.json() == {"message": "Session deleted successfully"}
        registry.delete_session.assert_awaited_once_with(session.id)


class TestParticipation:
    """Tests for participants, join and leave."""

    @pytest.mark.asyncio
    async def test_list_participants_hides_credentials(self, stores, registry):
        registry.get_session = AsyncMock(return_value=make_session())
        registry.list_participants = AsyncMock(return_value=[make_user(password_hash="$2b$x")])

        response = await _request("GET", f"/api/sessions/{uuid4()}/participants", headers=bearer(uuid4()))

        assert response.status_code == 200
        assert "password_hash" not in response.json()[0]

    @pytest.mark.asyncio
    async def test_join_notifies_creator(self, stores, registry, directory, notification_store):
        joiner = make_user(name="Bob")
        session = make_session(title="Go")
        registry.get_session = AsyncMock(return_value=session)
        registry.join_session = AsyncMock()
        directory.get_by_id = AsyncMock(return_value=joiner)
        notification_store.create_notification = AsyncMock()

        response = await _request("POST", f"/api/sessions/{session.id}/join", headers=bearer(joiner.id))

        assert response.status_code == 200
        assert response.json() == {"message": "Successfully joined the session"}
        registry.join_session.assert_awaited_once_with(session.id, joiner.id)
        notification_store.create_notification.assert_awaited_once_with(
            user_id=session.creator_id,
            message="User 'Bob' joined your session 'Go'.",
            type=NotificationType.NEW_PARTICIPANT,
            related_id=session.id,
            related_type="session",
        )

    @pytest.mark.asyncio
    async def test_join_own_session_is_400(self, stores, registry):
        user_id = uuid4()
        registry.get_session = AsyncMock(return_value=make_session(creator_id=user_id))
        registry.join_session = AsyncMock()

        response = await _request("POST", f"/api/sessions/{uuid4()}/join", headers=bearer(user_id))

        assert response.status_code == 400
        registry.join_session.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", [StoreErrorKind.SESSION_FULL, StoreErrorKind.ALREADY_JOINED])
    async def test_join_conflicts_are_409(self, stores, registry, kind):
        registry.get_session = AsyncMock(return_value=make_session())
        registry.join_session = AsyncMock(side_effect=StoreError(kind))

        response = await _request("POST", f"/api/sessions/{uuid4()}/join", headers=bearer(uuid4()))

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_join_succeeds_when_notification_fails(self, stores, registry, directory, notification_store):
        registry.get_session = AsyncMock(return_value=make_session())
        registry.join_session = AsyncMock()
        directory.get_by_id = AsyncMock(return_value=make_user())
        notification_store.create_notification = AsyncMock(side_effect=StoreError(StoreErrorKind.DATABASE))

        response = await _request("POST", f"/api/sessions/{uuid4()}/join", headers=bearer(uuid4()))

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_leave_without_join_is_409(self, stores, registry):
        registry.leave_session = AsyncMock(side_effect=StoreError(StoreErrorKind.NOT_JOINED))

        response = await _request("POST", f"/api/sessions/{uuid4()}/leave", headers=bearer(uuid4()))

        assert response.status_code == 409
        assert response.json()["detail"] == "User is not a participant in this session"

    @pytest.mark.asyncio
    async def test_leave(self, stores, registry):
        user_id, session_id = uuid4(), uuid4()
        registry.leave_session = AsyncMock()

        response = await _request("POST", f"/api/sessions/{session_id}/leave", headers=bearer(user_id))

        assert response.status_code == 200
        registry.leave_session.assert_awaited_once_with(session_id, user_id)


class TestCalendarExport:
    """Tests for GET /api/sessions/{id}/ics."""

    @pytest.mark.asyncio
    async def test_ics_download(self, stores, registry):
        session = make_session()
        registry.get_session = AsyncMock(return_value=session)

        response = await _request("GET", f"/api/sessions/{session.id}/ics", headers=bearer(uuid4()))

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/calendar")
        assert f'filename="session-{session.id}.ics"' in response.headers["content-disposition"]
        assert "BEGIN:VCALENDAR" in response.text
        assert f"UID:{session.id}" in response.text
