"""
Process settings read from the environment.

Settings are read once and cached; the resulting object is immutable and is
passed explicitly to the pieces that need it (DB pool, auth service).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_JWT_SECRET = "dev-change-this-secret"
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


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
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    db_command_timeout: int = 30
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 14
    pagination_snapshot: bool = False
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"


def load_settings() -> Settings:
    # JSON_WEB_TOKEN is the historical name of the signing secret variable.
    secret = os.environ.get("JSON_WEB_TOKEN", "").strip() or _env_str("JWT_SECRET", DEFAULT_JWT_SECRET)
    return Settings(
        database_url=os.environ.get("DATABASE_URL", "").strip(),
        db_pool_min_size=_env_int("DB_POOL_MIN_SIZE", 1),
        db_pool_max_size=_env_int("DB_POOL_MAX_SIZE", 5),
        db_command_timeout=_env_int("DB_COMMAND_TIMEOUT", 30),
        jwt_secret=secret,
        jwt_algorithm=_env_str("JWT_ALG", "HS256"),
        access_token_expire_days=_env_int("ACCESS_TOKEN_EXPIRE_DAYS", 14),
        pagination_snapshot=_env_bool("PAGINATION_SNAPSHOT", False),
        cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
