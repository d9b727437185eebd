"""
Simulation core configuration settings.
"""

import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Core settings, overridable through NEXTERA_* environment variables."""

    # Persistence
    SAVE_DIR: str = "saves"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    # Runs
    DEFAULT_SEED: Optional[int] = None  # Fixed seed for reproducible sessions
    MAX_ACTIVE_PARTY: int = 4

    model_config = SettingsConfigDict(env_prefix="NEXTERA_", env_file=".env", extra="ignore")


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for an embedding application or a test session.

    Args:
        level: Level name overriding ``settings.LOG_LEVEL``.
    """
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format=settings.LOG_FORMAT,
    )
