from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=('.env', '.env.local'), env_file_encoding='utf-8', case_sensitive=False)

    project_name: str = Field(default="Edinburgh Antiques Trail")
    environment: Literal['local', 'test', 'development', 'staging', 'production'] = Field(default='local')
    api_v1_str: str = Field(default="/api/v1")
    database_url: str = Field(default="sqlite+aiosqlite:///./data/edinburgh-antiques.db")
    database_echo: bool = Field(default=False)

    secret_key: str = Field(default="changeme")
    access_token_expire_minutes: int = Field(default=12 * 60)
    admin_password_hash: str | None = Field(default=None)

    timezone: str = Field(default="Europe/London")
    closing_soon_minutes: int = Field(default=60)
    default_city: str = Field(default="Edinburgh")

    postcodes_api_url: str = Field(default="https://api.postcodes.io/postcodes")
    geocode_batch_size: int = Field(default=100, ge=1, le=100)
    geocode_timeout_seconds: float = Field(default=10.0)

    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)

    root_path: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[3])

    @property
    def is_debug(self) -> bool:
        return self.environment in {"local", "development"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


settings = get_settings()
