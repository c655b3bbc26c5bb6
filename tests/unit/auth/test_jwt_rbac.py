from __future__ import annotations

import uuid
from datetime import timedelta

import pytest

from gradeup.auth.jwt import create_access_token, decode_jwt, encode_jwt
from gradeup.auth.rbac import has_scopes, is_oversight_role, require_scopes
from gradeup.core.dependencies import get_current_user
from gradeup.core.exceptions import AuthenticationError, AuthorizationError


def test_jwt_roundtrip_contains_required_claims():
    user_id = uuid.uuid4()
    token = create_access_token(user_id=user_id, role="athlete", secret="test-secret", email="a@example.edu")
    claims = decode_jwt(token, secret="test-secret")
    assert claims["sub"] == str(user_id)
    assert claims["role"] == "athlete"
    assert claims["token_use"] == "access"
    assert "exp" in claims
    assert "iat" in claims
    assert "jti" in claims


def test_jwt_rejects_tampering_and_expiry():
    token = create_access_token(user_id=uuid.uuid4(), role="brand", secret="test-secret")
    with pytest.raises(AuthenticationError):
        decode_jwt(token, secret="other-secret")
    with pytest.raises(AuthenticationError):
        decode_jwt("not-a-token", secret="test-secret")
    expired = encode_jwt({"sub": "x"}, secret="test-secret", ttl=timedelta(minutes=-5))
    with pytest.raises(AuthenticationError, match="expired"):
        decode_jwt(expired, secret="test-secret")


def test_rbac_blocks_missing_scope():
    require_scopes("athlete", ["contracts.sign"])
    with pytest.raises(AuthorizationError):
        require_scopes("athlete", ["payments.create"])
    with pytest.raises(AuthorizationError):
        require_scopes("director", ["contracts.write"])


def test_admin_wildcard_and_oversight_roles():
    assert has_scopes("admin", ["contracts.expire", "scores.batch"])
    assert not has_scopes("unknown", ["contracts.read"])
    assert is_oversight_role("director")
    assert not is_oversight_role("brand")


def test_current_user_requires_known_role_and_uuid_subject():
    from gradeup.core.config import get_config

    secret = get_config().JWT_SECRET
    user_id = uuid.uuid4()
    user = get_current_user(create_access_token(user_id=user_id, role="Brand", secret=secret))
    assert user.user_id == user_id
    assert user.role == "brand"

    with pytest.raises(AuthenticationError):
        get_current_user(create_access_token(user_id="not-a-uuid", role="brand", secret=secret))
    with pytest.raises(AuthenticationError):
        get_current_user(create_access_token(user_id=user_id, role="superuser", secret=secret))
    refresh = encode_jwt({"sub": str(user_id), "role": "brand", "token_use": "refresh"}, secret, timedelta(minutes=5))
    with pytest.raises(AuthenticationError):
        get_current_user(refresh)
