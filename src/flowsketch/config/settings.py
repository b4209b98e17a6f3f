"""Application settings.

All configuration is sourced from environment variables (and optionally `.env`).
Variables use the ``FLOWSKETCH_`` prefix, e.g. ``FLOWSKETCH_LOG_LEVEL=DEBUG``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed environment-backed settings for flowsketch."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWSKETCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Diagram layout (grid coordinates handed to the renderer)
    origin_x: float = 400.0
    origin_y: float = 50.0
    vertical_spacing: float = Field(default=120.0, gt=0)
    horizontal_spacing: float = Field(default=250.0, gt=0)

    # Upstream flow description generator
    language: Literal["tr", "en"] = "tr"
    anthropic_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("FLOWSKETCH_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
    )
    anthropic_model: str = "claude-sonnet-4-5"
    max_tokens: int = Field(default=2048, gt=0)

    # Persistence
    db_path: str = "flowsketch.sqlite"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # HTTP API
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
