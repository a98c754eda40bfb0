"""
Environment-driven settings.

Settings are read once at startup (see `api/main.py`) and passed explicitly to
the pieces that need them. Nothing here opens connections.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3001",
)


@dataclass(frozen=True)
class DatabaseSettings:
    url: str = ""
    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: str = "password"
    name: str = "blogspace"
    synchronize: bool = True
    log_sql: bool = True
    ssl: bool = False
    pool_min_size: int = 1
    pool_max_size: int = 5


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    database: DatabaseSettings = field(default_factory=DatabaseSettings)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings() -> Settings:
    environment = _env_str("APP_ENV", "development").lower()
    is_production = environment == "production"

    database = DatabaseSettings(
        url=os.environ.get("DATABASE_URL", "").strip(),
        host=_env_str("DATABASE_HOST", "localhost"),
        port=_env_int("DATABASE_PORT", 5432),
        username=_env_str("DATABASE_USERNAME", "postgres"),
        password=_env_str("DATABASE_PASSWORD", "password"),
        name=_env_str("DATABASE_NAME", "blogspace"),
        # Schema sync and SQL logging are development conveniences.
        synchronize=_env_bool("DB_SYNCHRONIZE", not is_production),
        log_sql=_env_bool("DB_LOG_SQL", not is_production),
        ssl=_env_bool("DB_SSL", is_production),
        pool_min_size=max(1, _env_int("DB_POOL_MIN_SIZE", 1)),
        pool_max_size=max(1, _env_int("DB_POOL_MAX_SIZE", 5)),
    )

    return Settings(
        environment=environment,
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        host=_env_str("API_HOST", "0.0.0.0"),
        port=_env_int("API_PORT", 3000),
        cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        database=database,
    )
