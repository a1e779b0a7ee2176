"""Configuration for page-loader using pydantic-settings.

All settings are driven by environment variables with the PAGE_LOADER_ prefix.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Loader configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAGE_LOADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    user_agent: str = "page-loader/0.1"
    accept_language: str = "en;q=0.9,*;q=0.5"

    timeout_total: float = 30.0
    # Only the final response of a redirect chain must be a 200.
    follow_redirects: bool = True

    # None means every resource of a page is requested at once.
    max_concurrency: Optional[int] = None

    page_max_attempts: int = 1
    backoff_multiplier: float = 1.0
    backoff_min: float = 1.0
    backoff_max: float = 10.0

    verbose: bool = False
    show_progress: bool = False


def get_settings() -> Settings:
    """Load settings from the environment."""
    s = Settings()
    logger.debug("Loaded settings: %s", s.model_dump())
    return s
