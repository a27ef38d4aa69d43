"""
Application configuration using Pydantic Settings.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Runtime
    # ===========================================
    DEBUG: bool = True
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./workspace_kpi.db"
    # Echo SQL statements (noisy, off unless debugging queries)
    DATABASE_ECHO: bool = False
    # Create missing tables on startup
    DATABASE_AUTO_CREATE: bool = True

    # ===========================================
    # Auth
    # ===========================================
    # - mock: bearer token is taken as the user ID (development only)
    # - local: HS256 JWT signed with LOCAL_JWT_SECRET
    AUTH_PROVIDER: Literal["mock", "local"] = "mock"
    LOCAL_JWT_SECRET: str = ""
    LOCAL_JWT_ISSUER: str = "workspace-kpi-local"
    LOCAL_JWT_EXPIRE_MINUTES: int = 60 * 24 * 7

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    # ===========================================
    # KPI Engine
    # ===========================================
    # Max concurrent task fetches per report request
    KPI_FETCH_CONCURRENCY: int = Field(default=8, ge=1)
    TEAM_KPI_DEFAULT_LIMIT: int = Field(default=10, ge=1)
    TEAM_KPI_MAX_LIMIT: int = Field(default=50, ge=1)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
