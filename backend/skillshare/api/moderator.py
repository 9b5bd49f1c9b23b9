# backend/skillshare/api/moderator.py
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from skillshare.core.deps import (
    Identity,
    get_session_registry,
    get_user_directory,
    require_moderator,
)
from skillshare.schemas.common import MessageResponse
from skillshare.services.sessions.registry import SessionRegistry
from skillshare.services.users.directory import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/moderator", tags=["moderator"])


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
async def delete_session(
    session_id: UUID,
    identity: Identity = Depends(require_moderator),
    registry: SessionRegistry = Depends(get_session_registry),
) -> MessageResponse:
    """Remove any session regardless of its creator."""
    await registry.delete_session(session_id)
    logger.info(f"Moderator {identity.user_id} deleted session {session_id}")
    return MessageResponse(message="Session deleted successfully")


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    identity: Identity = Depends(require_moderator),
    directory: UserDirectory = Depends(get_user_directory),
) -> MessageResponse:
    if user_id == identity.user_id:
        logger.warning(f"Moderator {identity.user_id} tried to delete their own account")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot delete your own account")
    await directory.delete_user(user_id)
    logger.info(f"Moderator {identity.user_id} deleted user {user_id}")
    return MessageResponse(message="User deleted successfully")
