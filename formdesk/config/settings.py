"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for formdesk.

    All settings can be overridden via environment variables.
    Prefix is not used to allow standard env var names (e.g., REDIS_URL).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False

    # Source registry (JSON array of {name, url, fields}); built-in list when unset
    sources_file: Path | None = None

    # HTTP
    http_timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_http_retries: int = Field(default=2, ge=0, le=10)
    max_backoff_seconds: float = Field(default=10.0, ge=0.0, le=300.0)

    # Local key-value storage
    cache_backend: Literal["file", "memory", "redis"] = "file"
    state_dir: Path = Path(".formdesk")
    redis_url: RedisDsn = Field(default="redis://localhost:6379/0")

    # Submissions cache
    cache_key: str = "submissions_data_cache"
    cache_expiry_minutes: int = Field(default=5, ge=0)

    # Admin session
    session_ttl_minutes: int = Field(default=30, ge=1)
    admin_users_file: Path = Path("admin_users.json")

    # Blog proxy and training form endpoints
    blog_api_url: str = "https://gas-proxy.designer-professionedgeglobal.workers.dev"
    training_form_url: str = (
        "https://script.google.com/macros/s/AKfycbzIINicPMtjJfimpnnciWj7nYlG34jsu8Hi8r"
        "L3XIQ7mr6AOGvaeUH5vK6_r4ZsZilXJQ/exec"
    )
    training_form_sheet: str = "Sheet1"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def cache_expiry_ms(self) -> int:
        """Cache freshness window in milliseconds."""
        return self.cache_expiry_minutes * 60_000

    @property
    def session_ttl_ms(self) -> int:
        """Session inactivity window in milliseconds."""
        return self.session_ttl_minutes * 60_000


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
