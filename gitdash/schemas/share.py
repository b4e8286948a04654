from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from gitdash.core.config import settings
from gitdash.schemas.aggregates import Aggregate, CamelModel

ShareType = Literal["dashboard", "repositories", "contributions"]


class ShareSettings(CamelModel):
    allow_comments: bool = False
    show_analytics: bool = True
    auto_expire: bool = True
    expire_days: int = Field(default=settings.DEFAULT_EXPIRE_DAYS, ge=1, le=365)
    show_private_repos: bool = False


class ShareSettingsPatch(CamelModel):
    """Only the fields present in the request are merged."""
    allow_comments: Optional[bool] = None
    show_analytics: Optional[bool] = None
    auto_expire: Optional[bool] = None
    expire_days: Optional[int] = Field(default=None, ge=1, le=365)
    show_private_repos: Optional[bool] = None


class ShareCreate(CamelModel):
    type: ShareType
    is_public: bool = False
    settings: Optional[ShareSettingsPatch] = None


class ShareUpdate(CamelModel):
    type: Optional[ShareType] = None
    is_public: Optional[bool] = None
    settings: Optional[ShareSettingsPatch] = None


class ShareOut(CamelModel):
    id: str
    owner_id: str
    username: Optional[str] = None
    avatar: Optional[str] = None
    type: ShareType
    is_public: bool
    settings: ShareSettings
    created_at: datetime
    expires_at: Optional[datetime] = None
    view_count: int = 0
    share_url: Optional[str] = None


class SharedView(CamelModel):
    """Public payload of GET /shared/{id}."""
    share_id: str
    username: Optional[str] = None
    avatar: Optional[str] = None
    type: ShareType
    data: Aggregate = Field(discriminator="type")
    created_at: datetime
    is_public: bool
    view_count: int
