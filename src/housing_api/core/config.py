"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="PostgreSQL async connection string (postgresql+asyncpg://...)",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema for isolated environments (e.g., pr_42)",
    )

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not re.fullmatch(r"[a-z_][a-z0-9_]{0,62}", v):
            msg = "Invalid database_schema: must match ^[a-z_][a-z0-9_]{0,62}$"
            raise ValueError(msg)
        return v

    # ZIP resolution
    store_query_timeout: float = Field(
        default=5.0,
        description="Per-step timeout in seconds for housing store and crosswalk queries",
        gt=0,
    )
    national_averages_ttl: int = Field(
        default=300,
        description="Seconds to cache national averages (0 recomputes on every request)",
        ge=0,
    )
    census_vintage: str = Field(
        default="Census ACS 5-Year 2023",
        description="Provenance label for the primary housing dataset",
    )
    crosswalk_vintage: str = Field(
        default="HUD USPS Crosswalk Q4 2025",
        description="Provenance label for the ZIP-to-county crosswalk",
    )

    # Query limits
    search_default_limit: int = Field(default=20, description="Default search result count", gt=0)
    search_max_limit: int = Field(default=50, description="Maximum search result count", gt=0)
    compare_max_zips: int = Field(default=10, description="Maximum ZIPs per comparison request", ge=2)
    export_max_zips: int = Field(default=100, description="Maximum ZIPs per CSV export request", gt=0)
    list_zips_limit: int = Field(
        default=200,
        description="Maximum ZIPs returned when listing a whole state",
        gt=0,
    )

    # Export
    export_dir: str = Field(
        default="./exports",
        description="Directory for CLI export output files",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )
    cors_origin_regex: str = Field(
        default="",
        description="Regex pattern for allowed CORS origins",
    )

    # Static dashboard
    static_dir: str | None = Field(
        default=None,
        description="Directory of the static research dashboard to serve at / (disabled when unset)",
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
