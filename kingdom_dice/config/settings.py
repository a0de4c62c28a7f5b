"""
Kingdom Dice - Application Settings

Loads configuration from environment variables (prefixed `KINGDOM_DICE_`)
or a `.env` file using Pydantic Settings.
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Gameplay
    roll_delay_seconds: float = 0.6
    default_target_score: int = 10000

    # Run the snapshot integrity checks after every state change
    check_invariants: bool = True

    model_config = SettingsConfigDict(
        env_prefix="KINGDOM_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
