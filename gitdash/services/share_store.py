"""
Document-style stores for share records and user profiles.

Both are thin get/set/update/delete-by-id wrappers over an ``AsyncSession``
with last-writer-wins semantics; nothing here locks or retries.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from gitdash.models.profile import UserProfile
from gitdash.models.share import ShareRecord
from gitdash.services.share_ids import generate_share_id

ID_ATTEMPTS = 3


class ShareStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, share_id: str) -> Optional[ShareRecord]:
        return await self.db.get(ShareRecord, share_id)

    async def list_for_owner(self, owner_id: str) -> List[ShareRecord]:
        result = await self.db.execute(
            select(ShareRecord)
            .where(ShareRecord.owner_id == owner_id)
            .order_by(ShareRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> ShareRecord:
        """Insert with a fresh id, drawing again on the unlikely collision."""
        for attempt in range(ID_ATTEMPTS):
            record = ShareRecord(id=generate_share_id(), **fields)
            self.db.add(record)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                if attempt == ID_ATTEMPTS - 1:
                    raise
                continue
            return record
        raise RuntimeError("unreachable")

    async def update(self, record: ShareRecord, changes: Dict[str, Any]) -> ShareRecord:
        for key, value in changes.items():
            setattr(record, key, value)
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def delete(self, record: ShareRecord) -> None:
        await self.db.delete(record)
        await self.db.commit()

    async def increment_views(self, record: ShareRecord) -> int:
        """Read-modify-write; concurrent viewers may overwrite each other."""
        record.view_count = (record.view_count or 0) + 1
        await self.db.commit()
        return record.view_count


class ProfileStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str) -> Optional[UserProfile]:
        return await self.db.get(UserProfile, user_id)

    async def upsert(self, user_id: str, changes: Dict[str, Any]) -> UserProfile:
        profile = await self.get(user_id)
        if profile is None:
            profile = UserProfile(id=user_id, theme="system", notifications={})
            self.db.add(profile)
        for key, value in changes.items():
            setattr(profile, key, value)
        await self.db.commit()
        await self.db.refresh(profile)
        return profile
