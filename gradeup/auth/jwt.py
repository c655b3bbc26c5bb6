"""HS256 bearer tokens.

Tokens are issued by the GradeUp auth service and carry the caller's profile
id (``sub``), marketplace role and ``token_use``. Only HS256 is accepted.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
import uuid
from datetime import timedelta
from typing import Any

from gradeup.core.exceptions import AuthenticationError

TOKEN_USE_ACCESS = "access"
ISSUER = "gradeup"
ALGORITHM = "HS256"
# Tolerated clock drift between the issuer and this API.
DEFAULT_LEEWAY_SECONDS = 30


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _signature(signing_input: str, secret: str) -> str:
    mac = hmac.new(secret.encode("utf-8"), signing_input.encode("ascii"), hashlib.sha256)
    return _b64url_encode(mac.digest())


def _decode_segment(segment: str, what: str) -> dict[str, Any]:
    try:
        value = json.loads(_b64url_decode(segment))
    except (ValueError, UnicodeDecodeError) as exc:
        raise AuthenticationError(f"Invalid token {what}.") from exc
    if not isinstance(value, dict):
        raise AuthenticationError(f"Invalid token {what}.")
    return value


def encode_jwt(payload: dict[str, Any], secret: str, ttl: timedelta) -> str:
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    issued_at = int(time.time())
    claims = {
        "iss": ISSUER,
        "iat": issued_at,
        "exp": issued_at + int(ttl.total_seconds()),
        "jti": uuid.uuid4().hex,
        **payload,
    }
    segments = [
        _b64url_encode(json.dumps(part, separators=(",", ":"), sort_keys=True).encode("utf-8"))
        for part in ({"alg": ALGORITHM, "typ": "JWT"}, claims)
    ]
    signing_input = ".".join(segments)
    return f"{signing_input}.{_signature(signing_input, secret)}"


def decode_jwt(
    token: str,
    secret: str,
    verify_exp: bool = True,
    leeway_seconds: int = DEFAULT_LEEWAY_SECONDS,
) -> dict[str, Any]:
    """Return the claims of ``token`` after checking algorithm, signature, issuer and expiry."""
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    parts = token.split(".")
    if len(parts) != 3:
        raise AuthenticationError("Invalid token format.")
    header_segment, payload_segment, signature_segment = parts

    if _decode_segment(header_segment, "header").get("alg") != ALGORITHM:
        raise AuthenticationError("Unsupported token algorithm.")
    expected = _signature(f"{header_segment}.{payload_segment}", secret)
    if not hmac.compare_digest(expected, signature_segment):
        raise AuthenticationError("Invalid token signature.")

    claims = _decode_segment(payload_segment, "payload")
    if claims.get("iss", ISSUER) != ISSUER:
        raise AuthenticationError("Token issued by an unknown issuer.")
    if verify_exp:
        if "exp" not in claims:
            raise AuthenticationError("Token is missing exp claim.")
        if int(claims["exp"]) + leeway_seconds < time.time():
            raise AuthenticationError("Token has expired.")
    return claims


def create_access_token(
    user_id: uuid.UUID | str,
    role: str,
    secret: str,
    email: str | None = None,
    ttl_minutes: int = 60,
) -> str:
    claims = {"sub": str(user_id), "role": role, "token_use": TOKEN_USE_ACCESS}
    if email:
        claims["email"] = email
    return encode_jwt(claims, secret=secret, ttl=timedelta(minutes=ttl_minutes))
