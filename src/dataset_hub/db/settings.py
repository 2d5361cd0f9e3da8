from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./dataset_hub.sqlite3"


class DBSettings(BaseSettings):
    """
    Database settings.

    Env support:
      - DB_* variables: DB_DATABASE_URL, DB_ECHO, DB_POOL_SIZE, DB_MAX_OVERFLOW,
        DB_CREATE_SCHEMA
      - DATABASE_URL is accepted as a fallback for convenience.
    """

    database_url: Optional[str] = Field(default=None)
    echo: bool = Field(default=False)
    pool_size: int = Field(default=5)
    max_overflow: int = Field(default=10)
    pool_recycle: Optional[int] = Field(default=None)  # seconds; None -> 1800
    create_schema: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
        # normalize legacy postgres:// to the async driver url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


@lru_cache
def get_db_settings(**kwargs) -> DBSettings:
    filtered = {k: v for k, v in kwargs.items() if v is not None}
    return DBSettings(**filtered)
