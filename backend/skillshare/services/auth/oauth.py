# backend/skillshare/services/auth/oauth.py
"""Google OAuth 2.0 client: consent URL, code exchange and profile lookup."""
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from skillshare.core.config import settings

GOOGLE_PROVIDER = "google"
REQUEST_TIMEOUT = 10.0


class OAuthError(Exception):
    """Base OAuth error."""
    pass


class OAuthNotConfiguredError(OAuthError):
    """Client credentials are missing from the settings."""
    pass


class OAuthTokenExchangeError(OAuthError):
    """Failed to exchange code for token."""
    pass


class OAuthUserInfoError(OAuthError):
    """Failed to get user info."""
    pass


@dataclass
class GoogleUserInfo:
    google_id: str
    email: str
    name: str | None
    verified_email: bool


def _is_verified(data: dict) -> bool:
    # v3 userinfo reports "email_verified", v2 "verified_email"
    verified = data.get("email_verified", data.get("verified_email", False))
    if isinstance(verified, str):
        return verified.lower() == "true"
    return bool(verified)


class OAuthService:
    GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
    GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
    SCOPES = ["openid", "email", "profile"]

    def __init__(self):
        for name in ("google_client_id", "google_client_secret"):
            if not getattr(settings, name):
                raise OAuthNotConfiguredError(f"{name.upper()} not configured")

    def get_authorization_url(self, state: str) -> str:
        """Google consent screen URL carrying the CSRF state."""
        params = {
            "client_id": settings.google_client_id,
            "redirect_uri": settings.google_redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.SCOPES),
            "access_type": "offline",
            "state": state,
        }
        return f"{self.GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def _fetch_json(self, method: str, url: str, error_cls: type[OAuthError], **kwargs) -> dict:
        """Call a Google endpoint and decode its JSON body, raising error_cls on any failure."""
        try:
            async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise error_cls(f"Google returned {e.response.status_code} for {url}") from e
        except httpx.TimeoutException as e:
            raise error_cls(f"Timeout calling {url}: {e}") from e
        except httpx.RequestError as e:
            raise error_cls(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise error_cls(f"Invalid response format: {e}") from e

    async def exchange_code(self, code: str) -> dict:
        """Exchange authorization code for tokens."""
        data = await self._fetch_json(
            "POST",
            self.GOOGLE_TOKEN_URL,
            OAuthTokenExchangeError,
            data={
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": settings.google_redirect_uri,
            },
        )
        if "access_token" not in data:
            raise OAuthTokenExchangeError("Missing access_token in response")
        return data

    async def get_user_info(self, access_token: str) -> GoogleUserInfo:
        """Fetch the Google profile behind an access token."""
        data = await self._fetch_json(
            "GET",
            self.GOOGLE_USERINFO_URL,
            OAuthUserInfoError,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        for field in ("sub", "email"):
            if field not in data:
                raise OAuthUserInfoError(f"Missing '{field}' in response")

        return GoogleUserInfo(
            google_id=data["sub"],
            email=data["email"],
            name=data.get("name"),
            verified_email=_is_verified(data),
        )
