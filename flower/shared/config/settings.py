# 📄 File: flower/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The configuration center that reads all settings (backend address, keys, how long the
# rose survives without water, which couple we belong to) from environment variables.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for all client configuration parameters.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - typing for type hints
#
# 🔄 Connected Modules / Calls From:
# - flower.main (application container)
# - flower.shared.config.supabase (client creation)
# - flower.shared.utils.logging (log level / format)
# - Watering screen (dryness threshold, tick interval, couple id)

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="flower", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="text", description="Log format (json/text)")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional log file path")

    # =========================================================================
    # SUPABASE BACKEND
    # =========================================================================

    SUPABASE_URL: str = Field(default="http://localhost:54321", description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field(default="", description="Supabase anonymous key")

    # Tables backing the document collections
    USERNAMES_TABLE: str = Field(default="usernames", description="Username directory table")
    USERS_TABLE: str = Field(default="users", description="User records table")
    PROFILES_TABLE: str = Field(default="profiles", description="Public profiles table")
    WATERINGS_TABLE: str = Field(default="waterings", description="Watering events table")

    # Direct PostgreSQL connection, used by alembic migrations only
    DATABASE_URL: Optional[str] = Field(None, description="PostgreSQL connection URL")

    # =========================================================================
    # WATERING
    # =========================================================================

    COUPLE_ID: str = Field(default="demo-couple", description="Shared couple namespace")
    DRY_AFTER_HOURS: float = Field(default=3.0, description="Hours without watering before the plant wilts")
    DRY_CHECK_INTERVAL_SECONDS: float = Field(
        default=60.0,
        description="Interval of the periodic dryness re-evaluation"
    )

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only json and text formatters exist."""
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v

    @field_validator("DRY_AFTER_HOURS", "DRY_CHECK_INTERVAL_SECONDS")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "testing"

    @property
    def dry_after(self) -> timedelta:
        """Dryness threshold as a timedelta."""
        return timedelta(hours=self.DRY_AFTER_HOURS)


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
