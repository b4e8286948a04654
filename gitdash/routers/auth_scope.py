"""Authentication dependencies for caller-scoped endpoints."""

from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from gitdash.core.database import get_db
from gitdash.core.errors import NotFoundError, UnauthenticatedError
from gitdash.services.crypto import decrypt_token
from gitdash.services.github import GitHubClient
from gitdash.services.session_token import decode_session_token
from gitdash.services.share_store import ProfileStore


auth_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user_id: str


@dataclass
class GitHubContext:
    user_id: str
    username: str
    token: str


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials = Depends(auth_scheme),
) -> AuthContext:
    """Resolve the caller from a Bearer session token."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise UnauthenticatedError("Unauthorized")
    try:
        payload = decode_session_token(credentials.credentials)
    except ValueError as exc:
        raise UnauthenticatedError("Unauthorized") from exc
    return AuthContext(user_id=str(payload["sub"]))


def get_github_client_factory():
    """Overridden in tests to avoid talking to GitHub."""
    return GitHubClient


async def get_github_context(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
) -> GitHubContext:
    """The caller's own GitHub identity, for the dashboard endpoints."""
    profile = await ProfileStore(db).get(auth.user_id)
    if profile is None:
        raise NotFoundError("User profile not found")
    token = None
    if profile.github_token:
        try:
            token = decrypt_token(profile.github_token)
        except ValueError:
            token = None
    if not token or not profile.github_username:
        raise UnauthenticatedError("GitHub token or username not found")
    return GitHubContext(user_id=auth.user_id, username=profile.github_username, token=token)
