"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, PostgresDsn, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Database Licence Compliance API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Database (required - no default for security)
    database_url: PostgresDsn = Field(
        description="PostgreSQL connection URL. Must be set via environment variable."
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Licence unit calculation
    default_core_factor: float = Field(default=0.5, gt=0, le=4)
    cluster_capacity_divisor: float = Field(default=2.0, gt=0)

    # Alert service (best-effort side channel)
    alert_service_url: str = ""
    alert_service_username: str = ""
    alert_service_password: str = ""
    alert_timeout_seconds: float = 10.0
    alert_queue_size: int = Field(default=1000, ge=1)

    # Scheduled compliance check, 0 disables the job
    compliance_check_interval_minutes: int = Field(default=0, ge=0)

    # CORS settings
    cors_origins: str = "http://localhost:3000"  # Comma-separated list

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings for security requirements."""
        # Security: Prevent debug mode in production
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG mode cannot be enabled in production environment. "
                "This would expose API documentation and detailed error messages."
            )

        url = str(self.database_url)
        if not url.startswith(("postgresql://", "postgres://")):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL starting with 'postgresql://' or 'postgres://'"
            )

        if self.alert_service_url and not self.alert_service_url.startswith(("http://", "https://")):
            raise ValueError("ALERT_SERVICE_URL must be an http(s) URL")

        return self

    @property
    def async_database_url(self) -> str:
        """Get async database URL for SQLAlchemy with asyncpg.

        Converts sslmode parameter to ssl for asyncpg compatibility:
        - sslmode=disable -> ssl=disable
        - sslmode=require -> ssl=require
        """
        url = str(self.database_url)
        url = url.replace("postgresql://", "postgresql+asyncpg://")
        url = url.replace("postgres://", "postgresql+asyncpg://")
        url = url.replace("sslmode=", "ssl=")
        return url

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def alerts_enabled(self) -> bool:
        """Check whether an alert service endpoint is configured."""
        return bool(self.alert_service_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
