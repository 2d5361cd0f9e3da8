from .env import Env, get_env, pick
from .logging import JsonFormatter, setup_logging
from .settings import AppSettings, TeammateSeed, get_app_settings

__all__ = [
    "Env",
    "get_env",
    "pick",
    "JsonFormatter",
    "setup_logging",
    "AppSettings",
    "TeammateSeed",
    "get_app_settings",
]
