"""Process bootstrap run from the FastAPI lifespan."""

from __future__ import annotations

import logging

from gradeup.core.config import get_config
from gradeup.core.logging_config import configure_logging
from gradeup.database.db import get_active_database_url, verify_database_connection

logger = logging.getLogger(__name__)


def _deployment_warnings(config, database_scheme: str) -> list[str]:
    warnings = []
    if config.is_production and database_scheme.startswith("sqlite"):
        warnings.append("startup.production.sqlite_detected")
    if not config.STRIPE_SECRET_KEY:
        # Payment intents raise ConfigurationError until a key is set.
        warnings.append("startup.stripe.not_configured")
    return warnings


def validate_startup_config() -> None:
    """Check the database and report deployment gaps; raises only when the database is required and down."""
    config = get_config()
    if not verify_database_connection():
        if config.DB_CONNECTIVITY_REQUIRED:
            raise RuntimeError("Database connectivity check failed.")
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )

    database_scheme = get_active_database_url().split("://", 1)[0]
    for event in _deployment_warnings(config, database_scheme):
        logger.warning(event, extra={"event": event})

    logger.info(
        "startup.config.validated env=%s database=%s fee_percent=%s",
        config.ENV,
        database_scheme,
        config.PLATFORM_FEE_PERCENT,
        extra={"event": "startup.config.validated"},
    )


def bootstrap() -> None:
    configure_logging()
    validate_startup_config()
