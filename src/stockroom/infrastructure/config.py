"""Runtime settings, read from ``STOCKROOM_*`` environment variables.

Priority: explicit environment variable, then the default.  The default
database is a SQLite file in the data directory (``STOCKROOM_DATA_DIR``,
falling back to ``./data``).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "STOCKROOM_"
DEFAULT_DB_FILE = "stockroom.db"


class ConfigurationError(ValueError):
    """An environment variable holds a value that cannot be used."""


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    expiry_warning_days: int = 30
    conflict_retries: int = 1
    sql_echo: bool = False


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"{ENV_PREFIX}{name} cannot be negative")
    return value


def _bool(env: Mapping[str, str], name: str) -> bool:
    return env.get(ENV_PREFIX + name, "").strip().lower() in ("1", "true", "yes", "on")


def _default_database_url(env: Mapping[str, str]) -> str:
    data_dir = Path(env.get(ENV_PREFIX + "DATA_DIR") or "data").expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{data_dir / DEFAULT_DB_FILE}"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        database_url=env.get(ENV_PREFIX + "DATABASE_URL") or _default_database_url(env),
        log_level=(env.get(ENV_PREFIX + "LOG_LEVEL") or "INFO").upper(),
        expiry_warning_days=_int(env, "EXPIRY_WARNING_DAYS", 30),
        conflict_retries=_int(env, "CONFLICT_RETRIES", 1),
        sql_echo=_bool(env, "SQL_ECHO"),
    )
