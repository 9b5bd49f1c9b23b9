# backend/skillshare/api/users.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from skillshare.core.deps import Identity, get_current_identity, get_user_directory
from skillshare.core.security import hash_password, verify_password
from skillshare.schemas.common import MessageResponse
from skillshare.schemas.user import PasswordChangeRequest, UserProfileUpdate, UserResponse
from skillshare.services.users.directory import UserDirectory


router = APIRouter(tags=["users"])


@router.get("/users/me", response_model=UserResponse)
async def get_me(
    identity: Identity = Depends(get_current_identity),
    directory: UserDirectory = Depends(get_user_directory),
):
    return await directory.get_by_id(identity.user_id)


@router.put("/users/me", response_model=UserResponse)
async def update_me(
    body: UserProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Update name, bio and skills; omitted fields keep their value."""
    user = await directory.get_by_id(identity.user_id)
    return await directory.update_profile(user, name=body.name, bio=body.bio, skills=body.skills)


@router.put("/users/me/password", response_model=MessageResponse)
async def change_password(
    body: PasswordChangeRequest,
    identity: Identity = Depends(get_current_identity),
    directory: UserDirectory = Depends(get_user_directory),
) -> MessageResponse:
    user = await directory.get_by_id(identity.user_id)
    if not user.has_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account has no password; sign in with your OAuth provider",
        )
    if not verify_password(body.current_password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Current password is incorrect")

    await directory.update_password(user, hash_password(body.new_password))
    return MessageResponse(message="Password updated successfully")


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    identity: Identity = Depends(get_current_identity),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Public profile of another user."""
    return await directory.get_by_id(user_id)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    identity: Identity = Depends(get_current_identity),
    directory: UserDirectory = Depends(get_user_directory),
) -> MessageResponse:
    await directory.invalidate_refresh_token(identity.user_id)
    return MessageResponse(message="Logged out successfully")
