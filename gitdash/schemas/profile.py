from datetime import datetime
from typing import Dict, Literal, Optional

from pydantic import Field

from gitdash.schemas.aggregates import CamelModel


class ProfileUpdate(CamelModel):
    github_username: Optional[str] = Field(default=None, min_length=1, max_length=39, pattern=r"^[A-Za-z0-9-]+$")
    avatar: Optional[str] = None
    github_token: Optional[str] = Field(default=None, min_length=1)
    theme: Optional[Literal["light", "dark", "system"]] = None
    notifications: Optional[Dict[str, bool]] = None


class ProfileOut(CamelModel):
    """The stored token never leaves the server, only whether one exists."""
    id: str
    github_username: Optional[str] = None
    avatar: Optional[str] = None
    has_github_token: bool = False
    theme: str = "system"
    notifications: Dict[str, bool] = Field(default_factory=dict)
    updated_at: Optional[datetime] = None


class ExportRequest(CamelModel):
    export_type: str
