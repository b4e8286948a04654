"""Signed caller identity tokens for the authenticated endpoints."""

from datetime import timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from gitdash.core.config import settings
from gitdash.utils.time import utc_now


SESSION_TOKEN_TYPE = "gitdash_session"


def create_session_token(user_id: str, expires_hours: Optional[int] = None) -> Dict[str, Any]:
    now = utc_now()
    ttl_hours = int(expires_hours or settings.JWT_EXPIRATION_HOURS or 24)
    expires_at = now + timedelta(hours=max(ttl_hours, 1))
    claims: Dict[str, Any] = {
        "sub": user_id,
        "type": SESSION_TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return {"token": token, "expires_at": int(expires_at.timestamp())}


def decode_session_token(token: str) -> Dict[str, Any]:
    """Decode and validate a signed session token, ValueError otherwise."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid or expired session token.") from exc

    if str(payload.get("type", "")).strip() != SESSION_TOKEN_TYPE:
        raise ValueError("Invalid session token type.")
    if not str(payload.get("sub", "")).strip():
        raise ValueError("Session token missing subject.")
    return payload
