"""Bearer-token authorization used by every route module."""

from __future__ import annotations

import logging

from gradeup.auth.rbac import require_scopes
from gradeup.core.config import get_config
from gradeup.core.dependencies import CurrentUser, get_current_user
from gradeup.core.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)


def bearer_token(header_value: str | None) -> str:
    scheme, _, token = (header_value or "").strip().partition(" ")
    if not scheme:
        raise AuthenticationError("Authorization header is required.")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must use Bearer token.")
    return token.strip()


def authorize(authorization: str | None, scopes: list[str]) -> CurrentUser:
    """Resolve the caller and require every scope in ``scopes``."""
    user = get_current_user(token=bearer_token(authorization), settings=get_config())
    try:
        require_scopes(user.role, scopes)
    except AuthorizationError:
        logger.warning(
            "auth.scope_denied role=%s scopes=%s",
            user.role,
            ",".join(scopes),
            extra={"event": "auth.scope_denied", "user_id": str(user.user_id)},
        )
        raise
    return user
