from skillshare.services.auth.oauth import OAuthService, GoogleUserInfo, OAuthError
from skillshare.services.auth.tokens import (
    TokenPair,
    InvalidRefreshTokenError,
    mint_token_pair,
    issue_tokens,
    rotate_refresh_token,
)

__all__ = [
    "OAuthService",
    "GoogleUserInfo",
    "OAuthError",
    "TokenPair",
    "InvalidRefreshTokenError",
    "mint_token_pair",
    "issue_tokens",
    "rotate_refresh_token",
]
