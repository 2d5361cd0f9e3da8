from __future__ import annotations

import os
import warnings
from enum import StrEnum
from functools import cache


class Env(StrEnum):
    LOCAL = "local"
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


_ALIASES: dict[str, Env] = {
    "development": Env.DEV,
    "testing": Env.TEST,
    "production": Env.PROD,
}


@cache
def get_env() -> Env:
    """APP_ENV, resolved once. Unset or unknown values mean local."""
    raw = (os.getenv("APP_ENV") or "").strip()
    if not raw:
        return Env.LOCAL
    key = raw.lower()
    if key in {e.value for e in Env}:
        return Env(key)
    if key in _ALIASES:
        return _ALIASES[key]
    warnings.warn(f"Unrecognized APP_ENV {raw!r}, using 'local'", RuntimeWarning, stacklevel=2)
    return Env.LOCAL


def pick(*, prod, nonprod):
    """Per-environment value, e.g. the default log level or log format."""
    env = get_env()
    if env is Env.PROD:
        return prod
    return nonprod
