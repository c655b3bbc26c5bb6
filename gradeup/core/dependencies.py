"""Dependency providers for API handlers."""

from __future__ import annotations

import uuid
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from gradeup.auth.jwt import TOKEN_USE_ACCESS, decode_jwt
from gradeup.auth.rbac import ROLE_SCOPES
from gradeup.core.config import Config, get_config
from gradeup.core.exceptions import AuthenticationError
from gradeup.database.db import get_db


@dataclass(frozen=True)
class CurrentUser:
    user_id: uuid.UUID
    role: str
    email: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_settings() -> Config:
    """Return validated application configuration."""
    return get_config()


def get_db_session() -> Generator[Session, None, None]:
    """Yield SQLAlchemy session for dependency injection."""
    yield from get_db()


def get_current_user(token: str, settings: Config | None = None) -> CurrentUser:
    """Resolve the caller from a bearer token."""
    cfg = settings or get_settings()
    claims = decode_jwt(token=token, secret=cfg.JWT_SECRET)
    if claims.get("token_use", TOKEN_USE_ACCESS) != TOKEN_USE_ACCESS:
        raise AuthenticationError("Access token required.")

    try:
        user = CurrentUser(
            user_id=uuid.UUID(str(claims["sub"])),
            role=str(claims["role"]).lower(),
            email=claims.get("email"),
            claims=claims,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid auth claims.") from exc
    if user.role not in ROLE_SCOPES:
        raise AuthenticationError("Unknown role in token.")
    return user
