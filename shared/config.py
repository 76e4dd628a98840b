"""
Runtime configuration for the subscription event mapper.

Settings are read from BENTO_* environment variables or a .env file in the
project root. Dry-run is on by default so nothing leaves the process until
credentials are configured and dry-run is switched off.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
DEFAULT_ENV_PATH: Path = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Bento credentials, delivery options and local paths."""

    site_uuid: str = Field(default="")
    publishable_key: str = Field(default="")
    secret_key: str = Field(default="")
    api_base_url: str = Field(default="https://app.bentonow.com/api/v1")
    timeout_seconds: float = Field(default=10.0, gt=0)

    dry_run: bool = Field(default=True)
    data_dir: Path = Field(default=PROJECT_ROOT / "data")
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="BENTO_",
        env_file=DEFAULT_ENV_PATH,
        extra="ignore",
    )

    def has_credentials(self) -> bool:
        return bool(self.site_uuid and self.publishable_key and self.secret_key)


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings (cached)."""
    return Settings()
