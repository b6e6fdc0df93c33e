"""
Runtime configuration for the socialgraph service.

Values come from the process environment first and fall back to the ``.env``
file in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]

ENV_PATH = BASE_DIR / ".env"

# Platform-provided variables win over the .env file
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="Social Graph", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    cors_origins: str | None = Field(default=None, alias="CORS_ORIGINS")

    feed_limit: int = Field(default=50, ge=1, alias="FEED_LIMIT")
    suggestion_limit: int = Field(default=5, ge=1, alias="SUGGESTION_LIMIT")
    search_limit: int = Field(default=20, ge=1, alias="SEARCH_LIMIT")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def allowed_origins(self) -> list[str]:
        if not self.cors_origins:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
