"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dialog_router.core.intents import InternalIntent


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DIALOG_ROUTER_LOG_LEVEL: str = Field(default="info")
    DIALOG_ROUTER_LOG_DIR: Path | None = Field(default=None)
    DIALOG_ROUTER_LOG_SCHEMA_VERSION: str = Field(default="1.0.0")
    DATA_DIR: Path = Field(default=Path("/data"))

    # Routing defaults
    UNHANDLED_INTENT: str = Field(default=InternalIntent.UNHANDLED.value)
    # Parsed from JSON, e.g. INTENT_MAP='{"AMAZON.HelpIntent": "HelpIntent"}'
    INTENT_MAP: dict[str, str] = Field(default_factory=dict)


settings = Settings()
config = settings


__all__ = ["Settings", "settings", "config"]
