from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gitdash.core.database import get_db
from gitdash.core.errors import NotFoundError
from gitdash.models.profile import UserProfile
from gitdash.routers.auth_scope import AuthContext, get_auth_context
from gitdash.schemas.profile import ProfileOut, ProfileUpdate
from gitdash.services.crypto import encrypt_token
from gitdash.services.share_store import ProfileStore

router = APIRouter()


def _profile_out(profile: UserProfile) -> ProfileOut:
    return ProfileOut(
        id=profile.id,
        github_username=profile.github_username,
        avatar=profile.avatar,
        has_github_token=bool(profile.github_token),
        theme=profile.theme or "system",
        notifications=profile.notifications or {},
        updated_at=profile.updated_at,
    )


@router.get("/profile", response_model=ProfileOut)
async def get_profile(auth: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    profile = await ProfileStore(db).get(auth.user_id)
    if profile is None:
        raise NotFoundError("User profile not found")
    return _profile_out(profile)


@router.put("/profile", response_model=ProfileOut)
async def update_profile(
    body: ProfileUpdate,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    changes = body.model_dump(exclude_none=True)
    if "github_token" in changes:
        changes["github_token"] = encrypt_token(changes["github_token"])
    profile = await ProfileStore(db).upsert(auth.user_id, changes)
    return _profile_out(profile)
