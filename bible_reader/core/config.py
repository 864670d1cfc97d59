from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


def load_env() -> None:
    load_dotenv()


class Settings(BaseModel):
    database_url: str = Field("sqlite:///bible_reader.db", alias="DATABASE_URL")
    asset_base_url: str = Field("https://llvbible.com", alias="ASSET_BASE_URL")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    history_limit: int = Field(25, alias="HISTORY_LIMIT")

    @field_validator("asset_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("history_limit")
    @classmethod
    def _positive_limit(cls, value: int) -> int:
        if value < 1:
            raise ValueError("HISTORY_LIMIT must be at least 1")
        return value


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        load_env()
        _settings = Settings(**os.environ)
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
