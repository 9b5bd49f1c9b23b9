# backend/skillshare/api/auth.py
import logging
import secrets
from urllib.parse import urlencode

from fastapi import APIRouter, Cookie, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from skillshare.core.config import settings
from skillshare.core.deps import get_user_directory
from skillshare.core.errors import StoreError
from skillshare.core.security import hash_password, verify_password, generate_state_token
from skillshare.schemas.auth import LoginRequest, RefreshTokenRequest, RegisterRequest, TokenResponse
from skillshare.services.auth.oauth import (
    GOOGLE_PROVIDER,
    OAuthError,
    OAuthNotConfiguredError,
    OAuthService,
)
from skillshare.services.auth.tokens import (
    InvalidRefreshTokenError,
    issue_tokens,
    mint_token_pair,
    rotate_refresh_token,
)
from skillshare.services.users.directory import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

OAUTH_STATE_COOKIE = "oauth_state"
OAUTH_STATE_MAX_AGE = 10 * 60

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    directory: UserDirectory = Depends(get_user_directory),
) -> TokenResponse:
    """Create a password account and sign the new user in."""
    user = await directory.create_user(
        email=body.email,
        password_hash=hash_password(body.password),
        name=body.name,
        bio=body.bio,
        skills=body.skills,
        role=body.role,
    )
    pair = await issue_tokens(directory, user)
    return TokenResponse(**pair.to_dict())


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    directory: UserDirectory = Depends(get_user_directory),
) -> TokenResponse:
    user = await directory.get_by_email(body.email)
    # Unknown email, OAuth-only account and wrong password look the same
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    pair = await issue_tokens(directory, user)
    return TokenResponse(**pair.to_dict())


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    body: RefreshTokenRequest,
    directory: UserDirectory = Depends(get_user_directory),
) -> TokenResponse:
    """Rotate the refresh token and issue a new access token."""
    try:
        pair = await rotate_refresh_token(directory, body.refresh_token)
    except InvalidRefreshTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return TokenResponse(**pair.to_dict())


def _oauth_service() -> OAuthService:
    try:
        return OAuthService()
    except OAuthNotConfiguredError as e:
        logger.error(f"Google OAuth requested but not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google login is not configured",
        )


@router.get("/google")
async def google_login() -> RedirectResponse:
    """Redirect to Google OAuth login with a CSRF state cookie."""
    service = _oauth_service()
    state = generate_state_token()
    redirect = RedirectResponse(url=service.get_authorization_url(state=state), status_code=307)
    redirect.set_cookie(
        key=OAUTH_STATE_COOKIE,
        value=state,
        httponly=True,
        secure=settings.environment == "production",
        samesite="lax",
        max_age=OAUTH_STATE_MAX_AGE,
    )
    return redirect


@router.get("/google/callback")
async def google_callback(
    code: str | None = None,
    state: str | None = None,
    oauth_state: str | None = Cookie(default=None, alias=OAUTH_STATE_COOKIE),
    directory: UserDirectory = Depends(get_user_directory),
) -> RedirectResponse:
    """Handle Google OAuth callback and hand tokens to the frontend."""
    if not state or not oauth_state:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing OAuth state")
    if not secrets.compare_digest(state, oauth_state):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid OAuth state (possible CSRF attempt)",
        )
    if not code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing authorization code")

    service = _oauth_service()
    try:
        tokens = await service.exchange_code(code)
        user_info = await service.get_user_info(tokens["access_token"])
    except OAuthError as e:
        logger.warning(f"Google OAuth failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Google authentication failed")

    if not user_info.verified_email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Google email is not verified")

    user = await directory.find_or_create_oauth_user(
        provider=GOOGLE_PROVIDER,
        oauth_id=user_info.google_id,
        email=user_info.email,
        name=user_info.name,
    )

    pair = mint_token_pair(user)
    try:
        await directory.save_refresh_token(user.id, pair.refresh_token)
    except StoreError as e:
        logger.warning(f"Could not persist refresh token for user {user.id}: {e.message}")

    fragment = urlencode({
        "access_token": pair.access_token,
        "refresh_token": pair.refresh_token,
        "expires_in": pair.expires_in,
        "provider": GOOGLE_PROVIDER,
    })
    redirect = RedirectResponse(url=f"{settings.frontend_oauth_callback_url}#{fragment}", status_code=307)
    redirect.delete_cookie(OAUTH_STATE_COOKIE)
    return redirect
