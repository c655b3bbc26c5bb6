"""Role-based authorization helpers."""

from __future__ import annotations

from gradeup.core.exceptions import AuthorizationError

# Scope strings are kept explicit for endpoint-level declarations.
ROLE_SCOPES: dict[str, set[str]] = {
    "admin": {
        "*",
    },
    "athlete": {
        "contracts.read",
        "contracts.write",
        "contracts.sign",
        "scores.calculate",
        "scores.read",
        "campaigns.read",
    },
    "brand": {
        "contracts.read",
        "contracts.write",
        "contracts.sign",
        "scores.read",
        "athletes.search",
        "campaigns.read",
        "campaigns.write",
        "payments.create",
    },
    "director": {
        "contracts.read",
        "scores.calculate",
        "scores.batch",
        "scores.read",
        "athletes.search",
        "campaigns.read",
    },
}

# Roles that see every contract rather than only their own deals.
OVERSIGHT_ROLES = frozenset({"admin", "director"})


def get_scopes_for_role(role: str) -> set[str]:
    """Return scopes granted to a role."""
    return ROLE_SCOPES.get(role.lower(), set())


def has_scopes(role: str, required_scopes: list[str] | set[str] | tuple[str, ...]) -> bool:
    granted = get_scopes_for_role(role)
    if "*" in granted:
        return True
    return set(required_scopes).issubset(granted)


def require_scopes(role: str, required_scopes: list[str] | set[str] | tuple[str, ...]) -> None:
    """Raise when a role lacks required scopes."""
    if has_scopes(role=role, required_scopes=required_scopes):
        return
    missing = sorted(set(required_scopes) - get_scopes_for_role(role))
    raise AuthorizationError(f"Missing required scopes: {', '.join(missing)}")


def is_oversight_role(role: str) -> bool:
    return role.lower() in OVERSIGHT_ROLES
