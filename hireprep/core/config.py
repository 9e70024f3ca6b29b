from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    upload_rate_limit: str
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    generate_temperature: float
    continue_temperature: float
    openai_timeout_s: float
    openai_max_retries: int
    storage_backend: str
    storage_db_path: str
    max_upload_bytes: int


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    upload_rate_limit=_get_env("UPLOAD_RATE_LIMIT", "20/minute") or "20/minute",
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    generate_temperature=_get_env_float("GENERATE_TEMPERATURE", 0.7),
    continue_temperature=_get_env_float("CONTINUE_TEMPERATURE", 0.8),
    # Generous default: a full prep package is a long completion.
    openai_timeout_s=_get_env_float("OPENAI_TIMEOUT_S", 60.0),
    openai_max_retries=_get_env_int("OPENAI_MAX_RETRIES", 0),
    storage_backend=(_get_env("STORAGE_BACKEND", "sqlite") or "sqlite").strip().lower(),
    storage_db_path=_get_env("STORAGE_DB_PATH", "data/hireprep_store.db") or "data/hireprep_store.db",
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
)

if settings.storage_backend not in {"sqlite", "memory"}:
    raise RuntimeError("STORAGE_BACKEND must be either 'sqlite' or 'memory'.")
