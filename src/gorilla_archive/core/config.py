"""Application configuration management.

This module provides configuration management using Pydantic settings
with environment variable support.
"""

from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BASE_URL_ENV_VAR = "BASE44_APP_BASE_URL"
BASE_URL_FALLBACK_ENV_VAR = "VITE_BASE44_APP_BASE_URL"


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden using environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="Gorilla Tag Version Archive", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment (development, staging, production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=8000, description="Port to bind to")
    workers: int = Field(default=4, description="Number of worker processes")
    reload: bool = Field(default=False, description="Enable auto-reload")

    # Backend settings
    backend_base_url: Optional[str] = Field(
        default=None,
        validation_alias=BASE_URL_ENV_VAR,
        description="Base origin that /api requests are forwarded to",
    )
    backend_base_url_fallback: Optional[str] = Field(
        default=None,
        validation_alias=BASE_URL_FALLBACK_ENV_VAR,
        description="Base origin used when the primary variable is unset or blank",
    )

    # Catalog settings
    catalog_data_file: Optional[str] = Field(
        default=None,
        description="JSON file with the update list (defaults to the bundled list)"
    )
    steam_app_id: str = Field(default="1533390", description="Steam application ID")
    steam_depot_id: str = Field(default="1533391", description="Steam depot ID")

    # Preferences settings
    preferences_dir: str = Field(default="./data/preferences", description="Preferences storage directory")
    preferences_key: str = Field(default="gt-prefs", description="Preferences storage key")

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")
    log_max_size: str = Field(default="10MB", description="Maximum log file size")
    log_backup_count: int = Field(default=5, description="Number of backup log files")

    # CORS settings
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins"
    )
    cors_allow_credentials: bool = Field(default=True, description="Allow CORS credentials")
    cors_allow_methods: Annotated[List[str], NoDecode] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        description="Allowed CORS methods"
    )
    cors_allow_headers: Annotated[List[str], NoDecode] = Field(default=["*"], description="Allowed CORS headers")

    # Monitoring settings
    metrics_enabled: bool = Field(default=True, description="Enable Prometheus metrics")

    @field_validator("cors_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def parse_comma_separated(cls, v):
        """Parse CORS lists from string or list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("backend_base_url", "backend_base_url_fallback")
    @classmethod
    def normalize_backend_base_url(cls, v):
        """Strip one trailing slash; treat blank values as unset."""
        if v is None or not v.strip():
            return None
        v = v.strip()
        return v[:-1] if v.endswith("/") else v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        allowed = ["json", "text"]
        if v not in allowed:
            raise ValueError(f"Log format must be one of {allowed}")
        return v

    @model_validator(mode="after")
    def resolve_backend_base_url(self):
        """Fall back to the secondary variable when the primary is unset or blank."""
        if self.backend_base_url is None:
            self.backend_base_url = self.backend_base_url_fallback
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
