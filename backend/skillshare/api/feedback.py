# backend/skillshare/api/feedback.py
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from skillshare.core.deps import (
    Identity,
    get_current_identity,
    get_feedback_store,
    get_session_registry,
)
from skillshare.schemas.feedback import FeedbackRequest, FeedbackResponse
from skillshare.services.feedback.store import FeedbackStore
from skillshare.services.sessions.registry import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["feedback"])


@router.post(
    "/{session_id}/feedback",
    response_model=FeedbackResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_feedback(
    session_id: UUID,
    body: FeedbackRequest,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
    feedback: FeedbackStore = Depends(get_feedback_store),
):
    """Rate a session the caller took part in. One rating per participant."""
    session = await registry.get_session(session_id)
    if session.creator_id == identity.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Session creators cannot review their own session",
        )
    if not await registry.is_participant(session_id, identity.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only participants can leave feedback",
        )

    return await feedback.create_feedback(
        session_id=session_id,
        user_id=identity.user_id,
        rating=body.rating,
        comment=body.comment,
    )


@router.get("/{session_id}/feedback", response_model=list[FeedbackResponse])
async def list_feedback(
    session_id: UUID,
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
    feedback: FeedbackStore = Depends(get_feedback_store),
):
    await registry.get_session(session_id)
    return await feedback.list_for_session(session_id)
