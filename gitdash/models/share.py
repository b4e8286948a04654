"""ShareRecord model for public dashboard snapshots."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from gitdash.core.database import Base


class ShareRecord(Base):
    """Owner-created capability granting read access to an aggregate."""

    __tablename__ = "shares"

    id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    username = Column(String, nullable=True)
    avatar = Column(String, nullable=True)
    type = Column(String, nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
    settings = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=True)
    view_count = Column(Integer, nullable=False, default=0)
