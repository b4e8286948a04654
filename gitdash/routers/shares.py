from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from gitdash.core.config import settings
from gitdash.core.database import get_db
from gitdash.routers.auth_scope import AuthContext, get_auth_context
from gitdash.schemas.share import ShareCreate, ShareOut, ShareUpdate
from gitdash.services import share_admin

router = APIRouter()


def share_url_for(request: Request, share_id: str) -> str:
    base = settings.PUBLIC_BASE_URL or str(request.base_url)
    return f"{base.rstrip('/')}/shared/{share_id}"


@router.post("/shares", response_model=ShareOut)
async def create_share(
    body: ShareCreate,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    record = await share_admin.create_share(auth.user_id, body, db)
    return share_admin.to_share_out(record, share_url_for(request, record.id))


@router.get("/shares", response_model=List[ShareOut])
async def list_shares(
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    records = await share_admin.list_shares(auth.user_id, db)
    return [share_admin.to_share_out(r, share_url_for(request, r.id)) for r in records]


@router.patch("/shares/{share_id}", response_model=ShareOut)
async def update_share(
    share_id: str,
    body: ShareUpdate,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    record = await share_admin.update_share(share_id, auth.user_id, body, db)
    return share_admin.to_share_out(record, share_url_for(request, record.id))


@router.delete("/shares/{share_id}")
async def delete_share(
    share_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    await share_admin.delete_share(share_id, auth.user_id, db)
    return {"success": True}
