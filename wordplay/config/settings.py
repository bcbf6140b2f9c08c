"""
WordPlay - Application Settings

Loads configuration from environment variables (prefix ``WORDPLAY_``) and an
optional ``.env`` file using Pydantic Settings.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Game defaults
    max_turns: int = Field(default=10, ge=1)
    initial_word: str | None = None
    initial_word_length: int = Field(default=4, ge=3, le=10)
    enable_key_letters: bool = True

    # Bot search
    bot_time_limit: float = Field(default=0.1, gt=0)
    bot_max_candidates: int = Field(default=1000, ge=1)

    # Supabase (saved games)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="WORDPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from settings. DEBUG wins over log_level."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("wordplay").setLevel(level)
