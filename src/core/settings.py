"""Application configuration via environment variables."""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class BingoSettings(BaseSettings):
    model_config = {"env_prefix": "BINGO_"}

    database_url: str = "sqlite:///dj_bingo.db"
    database_echo: bool = False
    log_dir: Optional[str] = None
    log_level: str = "INFO"
    # Number of songs shown in the "recently played" list
    recent_songs_limit: int = 10

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @field_validator("recent_songs_limit")
    @classmethod
    def validate_recent_songs_limit(cls, value: int) -> int:
        if value < 1:
            raise ValueError("recent_songs_limit must be at least 1")
        return value


@lru_cache
def get_settings() -> BingoSettings:
    return BingoSettings()
