# 📄 File: app/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# One place that reads every knob of the storage service from the environment: where Supabase
# lives, how old an upload must be before a sweep may remove it, how hard to retry deletions.
#
# 🧪 Purpose (Technical Summary):
# pydantic-settings model for Supabase access, storage cleanup policy,
# sync retry policy, and background job configuration.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - python-dotenv for .env file loading
# - typing for type hints
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - app.shared.config.supabase (client creation)
# - app.shared.core.sync_retry (default retry policy)
# - app.modules.community (storage cleanup services)
# - celery_config (broker configuration)

from datetime import timedelta
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_ENVIRONMENTS = frozenset({"development", "staging", "production", "test"})
ALLOWED_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """
    Environment-driven configuration, with .env as a fallback.

    Field names match the environment variable names exactly.
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

    APP_NAME: str = Field(default="Plant Care API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Plant Care community storage maintenance service",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=True, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")
    LOG_FILE: Optional[str] = Field(None, description="Optional log file path")

    # =========================================================================
    # SUPABASE CONFIGURATION
    # =========================================================================

    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")
    SUPABASE_JWT_SECRET: str = Field(..., description="Secret used to verify Supabase access tokens")
    SUPABASE_JWT_AUDIENCE: str = Field(default="authenticated", description="Expected JWT audience")
    SUPABASE_POSTGREST_TIMEOUT: int = Field(default=10, description="Record store request timeout (seconds)")
    SUPABASE_STORAGE_TIMEOUT: int = Field(default=30, description="Object store request timeout (seconds)")

    # Server
    HOST: str = Field(default="0.0.0.0", description="Bind host")
    PORT: int = Field(default=8000, description="Bind port")

    # Rate limiting (slowapi)
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable per-user endpoint rate limits")
    ORPHAN_SWEEP_RATE_LIMIT: str = Field(default="5/hour", description="Limit for on-demand orphan sweeps")
    POST_DELETE_RATE_LIMIT: str = Field(default="60/minute", description="Limit for post deletion endpoints")

    # CORS Settings
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:8080",
        description="CORS allowed origins"
    )

    # =========================================================================
    # STORAGE CLEANUP
    # =========================================================================

    STORAGE_CLEANUP_BATCH_SIZE: int = Field(
        default=50, ge=1, le=1000,
        description="Number of object paths per remove call"
    )
    STORAGE_ORPHAN_AGE_THRESHOLD_HOURS: float = Field(
        default=24.0, gt=0,
        description="Grace period before an unreferenced upload counts as orphaned"
    )
    STORAGE_LIST_PAGE_SIZE: int = Field(
        default=1000, ge=1,
        description="Page size when listing a user's objects in a bucket"
    )

    # =========================================================================
    # SYNC RETRY POLICY
    # =========================================================================

    SYNC_RETRY_MAX_RETRIES: int = Field(default=5, ge=1, description="Attempts per sync operation")
    SYNC_RETRY_BASE_DELAY: float = Field(default=1.0, ge=0, description="First backoff delay (seconds)")
    SYNC_RETRY_MAX_DELAY: float = Field(default=30.0, ge=0, description="Backoff delay cap (seconds)")
    SYNC_RETRY_BACKOFF_MULTIPLIER: float = Field(default=2.0, ge=1, description="Backoff growth factor")
    SYNC_RETRY_JITTER: bool = Field(default=True, description="Apply +/-10% jitter to delays")
    SYNC_RETRY_ATTEMPT_TIMEOUT: Optional[float] = Field(
        None, gt=0,
        description="Optional per-attempt timeout (seconds); a timeout is retried like any failure"
    )

    # Record deletion overrides
    DELETION_RETRY_MAX_RETRIES: int = Field(default=3, ge=1, description="Attempts per record deletion")
    DELETION_RETRY_BASE_DELAY: float = Field(default=2.0, ge=0, description="First deletion backoff delay")

    # =========================================================================
    # CELERY / BACKGROUND JOBS
    # =========================================================================

    CELERY_BROKER_URL: str = Field(
        default="redis://localhost:6379/1",
        description="Celery broker URL"
    )
    CELERY_RESULT_BACKEND: str = Field(
        default="redis://localhost:6379/2",
        description="Celery result backend URL"
    )
    ORPHAN_SWEEP_INTERVAL_HOURS: int = Field(
        default=24, ge=1,
        description="How often the scheduled orphan sweep runs"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        environment = v.lower()
        if environment not in ALLOWED_ENVIRONMENTS:
            raise ValueError(f"ENVIRONMENT must be one of {sorted(ALLOWED_ENVIRONMENTS)}")
        return environment

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ALLOWED_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(ALLOWED_LOG_LEVELS)}")
        return level

    @field_validator("CORS_ORIGINS")
    @classmethod
    def validate_cors_origins(cls, v: str) -> str:
        origins = [origin.strip() for origin in v.split(",")]
        for origin in origins:
            if not origin.startswith(("http://", "https://", "*")):
                raise ValueError(f"Invalid CORS origin format: {origin}")
        return v

    @field_validator("SUPABASE_URL")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Strip trailing slash so URL joins stay canonical."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("SUPABASE_URL must be an http(s) URL")
        return v.rstrip("/")

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS_ORIGINS split on commas."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "test"

    @property
    def orphan_age_threshold(self) -> timedelta:
        return timedelta(hours=self.STORAGE_ORPHAN_AGE_THRESHOLD_HOURS)


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """Settings read once per process and cached."""
    return Settings()
