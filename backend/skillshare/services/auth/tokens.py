"""Access/refresh token issuance and rotation."""
import logging
from dataclasses import dataclass, asdict

from skillshare.core.security import (
    access_token_lifetime,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
)
from skillshare.models.user import User
from skillshare.services.users.directory import UserDirectory

logger = logging.getLogger(__name__)


class InvalidRefreshTokenError(Exception):
    """Refresh token is malformed, expired, or no longer the active one."""
    pass


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int

    def to_dict(self) -> dict:
        return asdict(self)


def mint_token_pair(user: User) -> TokenPair:
    """Sign a new access/refresh pair for a user without persisting anything."""
    subject = str(user.id)
    access_token = create_access_token(
        {"sub": subject, "email": user.email, "role": user.role.value}
    )
    refresh_token = create_refresh_token({"sub": subject})
    return TokenPair(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=int(access_token_lifetime().total_seconds()),
    )


async def issue_tokens(directory: UserDirectory, user: User) -> TokenPair:
    """Mint a pair and make its refresh token the user's only valid one."""
    pair = mint_token_pair(user)
    await directory.save_refresh_token(user.id, pair.refresh_token)
    return pair


async def rotate_refresh_token(directory: UserDirectory, refresh_token: str) -> TokenPair:
    """Trade the active refresh token for a new pair."""
    payload = decode_refresh_token(refresh_token)
    if payload is None or not payload.get("sub"):
        raise InvalidRefreshTokenError("Invalid or expired refresh token")

    user = await directory.get_by_refresh_token(refresh_token)
    if user is None or str(user.id) != payload["sub"]:
        logger.warning(f"Refresh attempted with a revoked token for user {payload['sub']}")
        raise InvalidRefreshTokenError("Invalid or expired refresh token")

    return await issue_tokens(directory, user)
