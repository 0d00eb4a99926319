"""JWT service for PropertyPulse authentication."""

from datetime import datetime, timedelta, timezone

import jwt

from ...config import Settings


def create_access_token(
    user_id: str,
    email: str,
    role: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token."""
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "exp": expire,
        "iat": now,
        "type": "access",
    }

    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict | None:
    """Decode and validate a JWT access token.

    Returns:
        Token payload if valid, None if invalid or expired.
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except jwt.InvalidTokenError:
        return None
    if payload.get("type") != "access":
        return None
    return payload


def get_token_expiry_seconds(settings: Settings) -> int:
    """Get access token expiry in seconds."""
    return settings.access_token_expire_minutes * 60
