# backend/skillshare/api/sessions.py
import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from skillshare.core.deps import (
    Identity,
    get_current_identity,
    get_notification_store,
    get_optional_identity,
    get_session_registry,
    get_user_directory,
)
from skillshare.core.errors import StoreError
from skillshare.models.notification import NotificationType
from skillshare.models.session import Session
from skillshare.schemas.common import MessageResponse, Page, PageMeta
from skillshare.schemas.session import SessionRequest, SessionResponse, assume_utc
from skillshare.schemas.user import UserResponse
from skillshare.services.calendar.ics import CONTENT_TYPE, build_session_calendar, ics_filename
from skillshare.services.notifications.store import NotificationStore
from skillshare.services.sessions.registry import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_RECOMMENDATION_LIMIT,
    SessionRegistry,
    SessionSearchFilters,
)
from skillshare.services.users.directory import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _page(sessions: list[Session], total: int, limit: int, page: int) -> Page[SessionResponse]:
    return Page[SessionResponse](
        data=[SessionResponse.model_validate(s) for s in sessions],
        meta=PageMeta.build(total_items=total, per_page=limit, current_page=page),
    )


def _require_creator(session: Session, identity: Identity, action: str) -> None:
    if session.creator_id != identity.user_id:
        logger.warning(f"User {identity.user_id} tried to {action} session {session.id} they do not own")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only the session creator can {action} it",
        )


@router.get("", response_model=Page[SessionResponse])
async def list_sessions(
    q: str | None = None,
    category: str | None = None,
    location: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    exclude_past: bool = True,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
    page: int = Query(default=1, ge=1),
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
) -> Page[SessionResponse]:
    """Search sessions with filters and pagination, soonest first."""
    filters = SessionSearchFilters(
        q=q.strip() if q else None,
        category=category.strip() if category else None,
        location=location.strip() if location else None,
        date_from=assume_utc(date_from) if date_from else None,
        date_to=assume_utc(date_to) if date_to else None,
        exclude_past=exclude_past,
    )
    sessions, total = await registry.search_sessions(filters, limit=limit, page=page)
    return _page(sessions, total, limit, page)


@router.get("/my", response_model=Page[SessionResponse])
async def list_my_sessions(
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
    page: int = Query(default=1, ge=1),
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
) -> Page[SessionResponse]:
    """Sessions created by the caller, past ones included."""
    sessions, total = await registry.list_created_sessions(identity.user_id, limit=limit, page=page)
    return _page(sessions, total, limit, page)


@router.get("/joined", response_model=Page[SessionResponse])
async def list_joined_sessions(
    category: str | None = None,
    exclude_past: bool = False,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
    page: int = Query(default=1, ge=1),
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
) -> Page[SessionResponse]:
    sessions, total = await registry.list_joined_sessions(
        identity.user_id,
        category=category.strip() if category else None,
        exclude_past=exclude_past,
        limit=limit,
        page=page,
    )
    return _page(sessions, total, limit, page)


@router.get("/recommended", response_model=list[SessionResponse])
async def list_recommended_sessions(
    limit: int = Query(default=DEFAULT_RECOMMENDATION_LIMIT, ge=1, le=50),
    identity: Identity | None = Depends(get_optional_identity),
    registry: SessionRegistry = Depends(get_session_registry),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Personalised picks for a signed-in caller, otherwise the next sessions."""
    if identity is None:
        return await registry.recommended_general(limit=limit)

    try:
        user = await directory.get_by_id(identity.user_id)
    except StoreError:
        # Token outlived its account
        return await registry.recommended_general(limit=limit)
    return await registry.recommended_for_user(user, limit=limit)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: UUID,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
):
    return await registry.get_session(session_id)


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    body: SessionRequest,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
):
    if body.date_time <= datetime.now(timezone.utc):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Session date must be in the future")

    return await registry.create_session(
        creator_id=identity.user_id,
        title=body.title,
        description=body.description,
        category=body.category,
        date_time=body.date_time,
        location=body.location,
        max_participants=body.max_participants,
    )


@router.put("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: UUID,
    body: SessionRequest,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
):
    session = await registry.get_session(session_id)
    _require_creator(session, identity, "update")

    # A session that already started may keep its date, but cannot move into the past
    if body.date_time != assume_utc(session.date_time) and body.date_time <= datetime.now(timezone.utc):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Session date must be in the future")

    return await registry.update_session(session, **body.model_dump())


@router.delete("/{session_id}", response_model=MessageResponse)
async def delete_session(
    session_id: UUID,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
) -> MessageResponse:
    session = await registry.get_session(session_id)
    _require_creator(session, identity, "delete")
    await registry.delete_session(session_id)
    return MessageResponse(message="Session deleted successfully")


@router.get("/{session_id}/participants", response_model=list[UserResponse])
async def list_participants(
    session_id: UUID,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
):
    await registry.get_session(session_id)
    return await registry.list_participants(session_id)


@router.post("/{session_id}/join", response_model=MessageResponse)
async def join_session(
    session_id: UUID,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
    directory: UserDirectory = Depends(get_user_directory),
    notifications: NotificationStore = Depends(get_notification_store),
) -> MessageResponse:
    session = await registry.get_session(session_id)
    if session.creator_id == identity.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot join your own session")

    await registry.join_session(session_id, identity.user_id)

    try:
        participant = await directory.get_by_id(identity.user_id)
        await notifications.create_notification(
            user_id=session.creator_id,
            message=f"User '{participant.name}' joined your session '{session.title}'.",
            type=NotificationType.NEW_PARTICIPANT,
            related_id=session.id,
            related_type="session",
        )
    except StoreError as e:
        logger.warning(f"Could not notify creator of session {session_id} about a new participant: {e.message}")

    return MessageResponse(message="Successfully joined the session")


@router.post("/{session_id}/leave", response_model=MessageResponse)
async def leave_session(
    session_id: UUID,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
) -> MessageResponse:
    await registry.leave_session(session_id, identity.user_id)
    return MessageResponse(message="Successfully left the session")


@router.get("/{session_id}/ics")
async def export_session_ics(
    session_id: UUID,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
) -> Response:
    """Download the session as an iCalendar file."""
    session = await registry.get_session(session_id)
    return Response(
        content=build_session_calendar(session),
        media_type=CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{ics_filename(session)}"'},
    )
