"""Runtime settings for the GradeUp API, read once from the environment (.env supported)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from gradeup.core.exceptions import ConfigurationError

load_dotenv()

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
SUPPORTED_DATABASES = frozenset({"sqlite", "postgresql"})


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}.") from exc


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    JWT_SECRET: str
    JWT_ACCESS_TTL_MINUTES: int
    API_PREFIX: str
    LOG_LEVEL: str
    LOG_FILE: str
    STRIPE_SECRET_KEY: str | None
    STRIPE_WEBHOOK_SECRET: str | None
    PLATFORM_FEE_PERCENT: float
    PAYMENT_CURRENCY: str
    SCORE_BATCH_LIMIT: int
    SCORE_HISTORY_MAX: int
    SCORE_BATCH_WORKERS: int

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    production = resolved_env == "production"

    config = Config(
        APP_NAME="GradeUp",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=False if production else _env_bool("DEBUG", default=True),
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./gradeup.db"),
        DB_CONNECTIVITY_REQUIRED=_env_bool("DB_CONNECTIVITY_REQUIRED", default=production),
        JWT_SECRET=os.getenv("JWT_SECRET", "change_me_jwt_secret"),
        JWT_ACCESS_TTL_MINUTES=_env_int("JWT_ACCESS_TTL_MINUTES", 60),
        API_PREFIX=os.getenv("API_PREFIX", "/api"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
        STRIPE_SECRET_KEY=os.getenv("STRIPE_SECRET_KEY"),
        STRIPE_WEBHOOK_SECRET=os.getenv("STRIPE_WEBHOOK_SECRET"),
        PLATFORM_FEE_PERCENT=_env_float("PLATFORM_FEE_PERCENT", 12.0),
        PAYMENT_CURRENCY=os.getenv("PAYMENT_CURRENCY", "usd").lower(),
        SCORE_BATCH_LIMIT=_env_int("SCORE_BATCH_LIMIT", 100),
        SCORE_HISTORY_MAX=_env_int("SCORE_HISTORY_MAX", 50),
        SCORE_BATCH_WORKERS=_env_int("SCORE_BATCH_WORKERS", 1),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    try:
        url = make_url(database_url)
    except ArgumentError as exc:
        raise ConfigurationError("DATABASE_URL is not a valid database URL.") from exc
    if url.get_backend_name() not in SUPPORTED_DATABASES:
        raise ConfigurationError("DATABASE_URL must point at SQLite or PostgreSQL.")
    if url.get_backend_name() == "postgresql" and not url.host:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if config.JWT_ACCESS_TTL_MINUTES < 1:
        raise ConfigurationError("JWT_ACCESS_TTL_MINUTES must be >= 1.")
    if not config.API_PREFIX.startswith("/"):
        raise ConfigurationError("API_PREFIX must start with '/'.")
    if config.LOG_LEVEL not in LOG_LEVELS:
        raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(sorted(LOG_LEVELS))}.")
    if not 0 <= config.PLATFORM_FEE_PERCENT <= 100:
        raise ConfigurationError("PLATFORM_FEE_PERCENT must be between 0 and 100.")
    if not 1 <= config.SCORE_BATCH_LIMIT <= 100:
        raise ConfigurationError("SCORE_BATCH_LIMIT must be between 1 and 100.")
    if config.SCORE_HISTORY_MAX < 1:
        raise ConfigurationError("SCORE_HISTORY_MAX must be >= 1.")
    if config.SCORE_BATCH_WORKERS < 1:
        raise ConfigurationError("SCORE_BATCH_WORKERS must be >= 1.")

    if config.is_production:
        if "change_me" in config.JWT_SECRET:
            raise ConfigurationError("Production JWT_SECRET uses placeholder value.")
        if not config.STRIPE_WEBHOOK_SECRET:
            raise ConfigurationError("STRIPE_WEBHOOK_SECRET is required in production.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
