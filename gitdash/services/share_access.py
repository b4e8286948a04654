"""
Share access controller for the public ``GET /shared/{id}`` path.

The checks run in a fixed order and each failure maps to its own error, so
callers can tell a missing share from an expired or private one:

    LOOKUP -> EXPIRY_CHECK -> VISIBILITY_CHECK -> OWNER_LOOKUP -> TOKEN_CHECK
    -> AGGREGATE -> RECORD_VIEW -> SERVED

The owner's GitHub token is borrowed to fetch the owner's data on behalf of
an anonymous viewer. What private data may appear is decided by the share's
``showPrivateRepos`` setting inside the aggregation engine.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from gitdash.core.errors import ExpiredError, ForbiddenError, NotFoundError, UnauthenticatedError, UpstreamError
from gitdash.models.share import ShareRecord
from gitdash.schemas.share import SharedView
from gitdash.services.collector import aggregate_for
from gitdash.services.crypto import decrypt_token
from gitdash.services.github import GitHubAPIError, GitHubClient
from gitdash.services.share_store import ProfileStore, ShareStore
from gitdash.utils.time import as_utc, utc_now

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], GitHubClient]


def is_expired(record: ShareRecord, now: datetime) -> bool:
    expires_at = as_utc(record.expires_at)
    return expires_at is not None and expires_at < now


def show_private_repos(record: ShareRecord) -> bool:
    return bool((record.settings or {}).get("showPrivateRepos", False))


async def resolve_shared(
    share_id: str,
    db: AsyncSession,
    client_factory: ClientFactory,
    now: Optional[datetime] = None,
) -> SharedView:
    now = now or utc_now()
    shares = ShareStore(db)
    profiles = ProfileStore(db)

    record = await shares.get(share_id)
    if record is None:
        raise NotFoundError("Share not found")

    if is_expired(record, now):
        raise ExpiredError("Share has expired")

    if not record.is_public:
        raise ForbiddenError("Share is private")

    owner = await profiles.get(record.owner_id)
    if owner is None:
        raise NotFoundError("User not found")

    token = None
    if owner.github_token:
        try:
            token = decrypt_token(owner.github_token)
        except ValueError:
            logger.warning("Owner %s has an undecryptable GitHub token", record.owner_id)
    if not token:
        raise UnauthenticatedError("GitHub token not found")

    username = record.username or owner.github_username or ""
    try:
        data = await aggregate_for(record.type, client_factory(token), username, show_private_repos(record))
    except GitHubAPIError:
        logger.exception("Upstream failure while aggregating share %s", share_id)
        raise UpstreamError("Failed to fetch shared data")

    view = {
        "share_id": share_id,
        "username": record.username,
        "avatar": record.avatar,
        "type": record.type,
        "created_at": as_utc(record.created_at),
        "is_public": record.is_public,
    }
    view_count = (record.view_count or 0) + 1
    try:
        view_count = await shares.increment_views(record)
    except Exception:
        # counting is best effort; the aggregate is still served
        logger.exception("Failed to record view for share %s", share_id)
        await db.rollback()

    logger.info("Served share %s (type=%s, views=%d)", share_id, view["type"], view_count)
    return SharedView(**view, data=data, view_count=view_count)
