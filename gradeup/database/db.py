"""Engine and session factory.

SQLite URLs are accepted for local runs and tests; anything else is treated
as a pooled server database (PostgreSQL in deployment).
"""

from __future__ import annotations

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from gradeup.core.config import get_config

logger = logging.getLogger(__name__)

POOL_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 3600, "pool_size": 10, "max_overflow": 20}


def _create_engine(database_url: str, echo: bool) -> Engine:
    if make_url(database_url).get_backend_name() == "sqlite":
        # Request threads and the webhook threadpool share SQLite connections.
        return create_engine(database_url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(database_url, echo=False, **POOL_OPTIONS)


_config = get_config()
DATABASE_URL = _config.DATABASE_URL
engine = _create_engine(DATABASE_URL, echo=_config.DEBUG and not _config.is_production)
# Services hand ORM rows to response models after commit.
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_engine() -> Engine:
    return engine


def get_active_database_url() -> str:
    return DATABASE_URL


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; always closed when the request ends."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def verify_database_connection() -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error(
            "database.connection_failed: %s",
            exc,
            extra={"event": "database.connection_failed"},
        )
        return False
    return True
