# backend/skillshare/api/admin.py
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from skillshare.core.deps import (
    Identity,
    get_session_registry,
    get_user_directory,
    require_admin,
)
from skillshare.schemas.common import MessageResponse
from skillshare.schemas.user import UserResponse, UserRoleUpdateRequest
from skillshare.services.sessions.registry import SessionRegistry
from skillshare.services.users.directory import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    identity: Identity = Depends(require_admin),
    directory: UserDirectory = Depends(get_user_directory),
):
    return await directory.list_users()


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    identity: Identity = Depends(require_admin),
    directory: UserDirectory = Depends(get_user_directory),
):
    return await directory.get_by_id(user_id)


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: UUID,
    body: UserRoleUpdateRequest,
    identity: Identity = Depends(require_admin),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Change another user's role. Takes effect on their next token."""
    if user_id == identity.user_id:
        logger.warning(f"Admin {identity.user_id} tried to change their own role")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot change your own role")
    return await directory.update_role(user_id, body.role)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    identity: Identity = Depends(require_admin),
    directory: UserDirectory = Depends(get_user_directory),
) -> MessageResponse:
    if user_id == identity.user_id:
        logger.warning(f"Admin {identity.user_id} tried to delete their own account")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot delete your own account")
    await directory.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
async def delete_session(
    session_id: UUID,
    identity: Identity = Depends(require_admin),
    registry: SessionRegistry = Depends(get_session_registry),
) -> MessageResponse:
    """Remove any session regardless of its creator."""
    await registry.delete_session(session_id)
    logger.info(f"Admin {identity.user_id} deleted session {session_id}")
    return MessageResponse(message="Session deleted successfully")
