"""Owner-side share management: create, list, update, delete."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from gitdash.core.errors import ForbiddenError, NotFoundError
from gitdash.models.share import ShareRecord
from gitdash.schemas.share import ShareCreate, ShareOut, ShareSettings, ShareSettingsPatch, ShareUpdate
from gitdash.services.share_store import ProfileStore, ShareStore
from gitdash.utils.time import as_utc, days_from, utc_now

logger = logging.getLogger(__name__)


def merge_settings(current: Optional[Dict[str, Any]], patch: Optional[ShareSettingsPatch]) -> Dict[str, Any]:
    merged = ShareSettings().model_dump(by_alias=True)
    merged.update(current or {})
    if patch is not None:
        merged.update(patch.model_dump(by_alias=True, exclude_none=True))
    return ShareSettings.model_validate(merged).model_dump(by_alias=True)


def expiry_for(settings: Dict[str, Any], start: datetime) -> Optional[datetime]:
    if not settings.get("autoExpire"):
        return None
    return days_from(start, int(settings["expireDays"]))


def to_share_out(record: ShareRecord, share_url: Optional[str] = None) -> ShareOut:
    return ShareOut(
        id=record.id,
        owner_id=record.owner_id,
        username=record.username,
        avatar=record.avatar,
        type=record.type,
        is_public=record.is_public,
        settings=ShareSettings.model_validate(record.settings or {}),
        created_at=as_utc(record.created_at),
        expires_at=as_utc(record.expires_at),
        view_count=record.view_count or 0,
        share_url=share_url,
    )


async def create_share(owner_id: str, body: ShareCreate, db: AsyncSession, now: Optional[datetime] = None) -> ShareRecord:
    profile = await ProfileStore(db).get(owner_id)
    if profile is None:
        raise NotFoundError("User profile not found")

    now = now or utc_now()
    settings = merge_settings(None, body.settings)
    record = await ShareStore(db).create(
        owner_id=owner_id,
        username=profile.github_username,
        avatar=profile.avatar,
        type=body.type,
        is_public=body.is_public,
        settings=settings,
        created_at=now,
        expires_at=expiry_for(settings, now),
        view_count=0,
    )
    logger.info("Created %s share %s for %s", record.type, record.id, owner_id)
    return record


async def list_shares(owner_id: str, db: AsyncSession) -> List[ShareRecord]:
    return await ShareStore(db).list_for_owner(owner_id)


async def _owned_share(share_id: str, caller_id: str, store: ShareStore) -> ShareRecord:
    record = await store.get(share_id)
    if record is None:
        raise NotFoundError("Share not found")
    if record.owner_id != caller_id:
        logger.warning("User %s tried to modify share %s owned by someone else", caller_id, share_id)
        raise ForbiddenError("Forbidden")
    return record


async def update_share(
    share_id: str,
    caller_id: str,
    body: ShareUpdate,
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> ShareRecord:
    store = ShareStore(db)
    record = await _owned_share(share_id, caller_id, store)

    changes: Dict[str, Any] = {}
    if body.type is not None:
        changes["type"] = body.type
    if body.is_public is not None:
        changes["is_public"] = body.is_public
    if body.settings is not None:
        settings = merge_settings(record.settings, body.settings)
        changes["settings"] = settings
        # an edit restarts the expiry window from now, not from created_at
        if body.settings.auto_expire is not None or body.settings.expire_days is not None:
            changes["expires_at"] = expiry_for(settings, now or utc_now())

    if not changes:
        return record
    return await store.update(record, changes)


async def delete_share(share_id: str, caller_id: str, db: AsyncSession) -> None:
    store = ShareStore(db)
    record = await _owned_share(share_id, caller_id, store)
    await store.delete(record)
    logger.info("Deleted share %s", share_id)
