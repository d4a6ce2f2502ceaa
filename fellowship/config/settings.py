"""
Centralized configuration management using Pydantic Settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional, List, Union
from pathlib import Path


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "Fellowship Community Boards"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", alias="APP_ENV")

    # Database
    # Default to a local SQLite DB for development if DATABASE_URL is not provided
    database_url: str = Field(
        default=f"sqlite:///{Path(__file__).resolve().parent.parent.parent}/fellowship.db",
        alias="DATABASE_URL",
    )
    pool_size: int = 5
    max_overflow: int = 10
    pool_pre_ping: bool = True

    # CORS
    cors_origins: Union[str, List[str]] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        alias="CORS_ORIGINS"
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    # Boards
    board_page_size: int = Field(default=20, alias="BOARD_PAGE_SIZE")
    board_max_page_size: int = Field(default=100, alias="BOARD_MAX_PAGE_SIZE")
    moderator_roles: Union[str, List[str]] = Field(
        default_factory=lambda: ["admin", "moderator"],
        alias="MODERATOR_ROLES"
    )
    user_search_limit: int = Field(default=10, alias="USER_SEARCH_LIMIT")

    # Startup
    seed_categories: bool = Field(default=True, alias="SEED_CATEGORIES")
    run_migrations_on_startup: bool = Field(default=True, alias="RUN_MIGRATIONS_ON_STARTUP")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="text", alias="LOG_FORMAT")  # json or text
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")

    @field_validator("cors_origins", mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            if not v:  # Handle empty string
                return ["http://localhost:3000"]
            return [origin.strip() for origin in v.split(",")]
        elif v is None:
            return ["http://localhost:3000"]
        return v

    @field_validator("moderator_roles", mode='before')
    @classmethod
    def parse_moderator_roles(cls, v):
        if isinstance(v, str):
            roles = [role.strip().lower() for role in v.split(",") if role.strip()]
            return roles or ["admin", "moderator"]
        elif v is None:
            return ["admin", "moderator"]
        return [str(role).lower() for role in v]

    @field_validator("board_page_size", "board_max_page_size")
    @classmethod
    def ensure_positive(cls, v):
        if v < 1:
            raise ValueError("page sizes must be positive")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        v = (v or "text").lower()
        if v not in ("text", "json"):
            raise ValueError("log_format must be 'text' or 'json'")
        return v

    @property
    def effective_page_size(self) -> int:
        return min(self.board_page_size, self.board_max_page_size)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the settings singleton instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings



def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
