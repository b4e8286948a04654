"""
Public share endpoint (no authentication required).
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gitdash.core.database import get_db
from gitdash.core.errors import GitdashError, UpstreamError
from gitdash.routers.auth_scope import get_github_client_factory
from gitdash.schemas.share import SharedView
from gitdash.services.share_access import resolve_shared

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/shared/{share_id}", response_model=SharedView)
async def get_shared(
    share_id: str,
    db: AsyncSession = Depends(get_db),
    client_factory=Depends(get_github_client_factory),
):
    try:
        return await resolve_shared(share_id, db, client_factory)
    except GitdashError:
        raise
    except Exception:
        logger.exception("Failed to resolve shared data for %s", share_id)
        raise UpstreamError("Failed to fetch shared data")
