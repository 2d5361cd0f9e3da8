from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TeammateSeed(BaseModel):
    name: str
    passcode: str


DEFAULT_TEAMMATES: list[TeammateSeed] = [
    TeammateSeed(name="atu", passcode="pass1"),
    TeammateSeed(name="saha", passcode="pass2"),
    TeammateSeed(name="mich", passcode="pass3"),
    TeammateSeed(name="hars", passcode="pass4"),
    TeammateSeed(name="pree", passcode="pass5"),
]


class AppSettings(BaseSettings):
    """
    Application settings.

    Env support:
      APP_NAME, APP_VERSION, APP_RECENT_LIMIT, APP_SEED_ON_STARTUP and
      APP_TEAMMATES (JSON list of {"name": ..., "passcode": ...}).
    The order of APP_TEAMMATES is the display order everywhere.
    """

    name: str = "Dataset Viewer"
    version: str = "0.1.0"
    recent_limit: int = Field(default=5, ge=1)
    seed_on_startup: bool = True
    teammates: list[TeammateSeed] = Field(
        default_factory=lambda: [t.model_copy() for t in DEFAULT_TEAMMATES]
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_app_settings(**kwargs) -> AppSettings:
    # Only include kwargs that are not None, so defaults in AppSettings are used
    filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return AppSettings(**filtered_kwargs)
