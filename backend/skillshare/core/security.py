# backend/skillshare/core/security.py
import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from jose import jwt
from passlib.context import CryptContext

from skillshare.core.config import settings

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return _pwd_context.verify(password, password_hash)
    except ValueError:
        # Unrecognised hash format
        return False


def access_token_lifetime() -> timedelta:
    return timedelta(minutes=settings.jwt_access_token_minutes)


def refresh_token_lifetime() -> timedelta:
    return timedelta(hours=settings.jwt_refresh_token_hours)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or access_token_lifetime())
    to_encode.update({"exp": expire, "type": ACCESS_TOKEN_TYPE})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=ALGORITHM)


def create_refresh_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or refresh_token_lifetime())
    # jti keeps two tokens minted in the same second distinct
    to_encode.update({"exp": expire, "type": REFRESH_TOKEN_TYPE, "jti": secrets.token_urlsafe(16)})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=ALGORITHM)


def decode_token(token: str, expected_type: str | None = None) -> dict | None:
    """Decode and verify signature/expiry. Returns None when the token is unusable."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[ALGORITHM])
    except jwt.JWTError:
        return None
    if expected_type and payload.get("type") != expected_type:
        return None
    return payload


def decode_access_token(token: str) -> dict | None:
    return decode_token(token, expected_type=ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> dict | None:
    return decode_token(token, expected_type=REFRESH_TOKEN_TYPE)


def hash_token(token: str) -> str:
    """Hash a refresh token for storage."""
    return hashlib.sha256(token.encode()).hexdigest()


def generate_state_token() -> str:
    return secrets.token_urlsafe(32)
