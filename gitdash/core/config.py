import os
from typing import List, Optional

class Settings:
    GITHUB_API: str = os.getenv("GITHUB_API", "https://api.github.com")
    GITHUB_GRAPHQL_URL: str = os.getenv("GITHUB_GRAPHQL_URL", "https://api.github.com/graphql")
    GITHUB_TIMEOUT: int = int(os.getenv("GITHUB_TIMEOUT", "20"))
    CORS_ORIGINS: List[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")]
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./gitdash.db")

    # caller identity tokens
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change_me_in_production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRATION_HOURS: int = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

    # at-rest encryption of stored GitHub tokens
    ENCRYPTION_KEY: str = os.getenv("ENCRYPTION_KEY", "change_me_32_byte_key_for_prod")

    PUBLIC_BASE_URL: Optional[str] = os.getenv("PUBLIC_BASE_URL") or None
    DEFAULT_EXPIRE_DAYS: int = int(os.getenv("DEFAULT_EXPIRE_DAYS", "30"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
