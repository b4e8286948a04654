"""UserProfile model holding the owner's GitHub identity."""

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlalchemy.sql import func

from gitdash.core.database import Base


class UserProfile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    github_username = Column(String, nullable=True)
    avatar = Column(String, nullable=True)
    # Fernet ciphertext, see gitdash.services.crypto
    github_token = Column(Text, nullable=True)
    theme = Column(String, nullable=False, default="system")
    notifications = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
