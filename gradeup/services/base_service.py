"""Session lifecycle shared by services and SQL repositories."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from gradeup.core.exceptions import ConflictError, DatabaseError
from gradeup.database import db as database

logger = logging.getLogger(__name__)


class BaseService:
    """Wraps one SQLAlchemy session.

    A session passed in by the caller (request scope, tests) is borrowed and
    never closed here; a session opened by this class is owned and closed on
    ``close()`` / context exit.
    """

    def __init__(self, db: Session | None = None) -> None:
        self._owns_session = db is None
        self.db = db or database.SessionLocal()

    def commit(self) -> None:
        """Commit the unit of work, translating store failures."""
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("Write conflicts with an existing record.") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("database.commit_failed: %s", exc, extra={"event": "database.commit_failed"})
            raise DatabaseError(str(exc)) from exc

    def flush(self) -> None:
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("Write conflicts with an existing record.") from exc

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        if self._owns_session:
            self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
