"""Deterministic sanitizers applied to free text before validation and storage."""

from __future__ import annotations

import html
import re

_TAG_RE = re.compile(r"<[^>]*>")
_IP_MAX_LEN = 45


def sanitize_text(value: str | None) -> str:
    """Strip NUL bytes and HTML tags, unescape entities, trim whitespace."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "")
    cleaned = _TAG_RE.sub("", cleaned)
    return html.unescape(cleaned).strip()


def sanitize_optional(value: str | None) -> str | None:
    """Like ``sanitize_text`` but keeps ``None`` and maps blank input to ``None``."""
    if value is None:
        return None
    cleaned = sanitize_text(value)
    return cleaned or None


def client_ip(forwarded_for: str | None, real_ip: str | None) -> str | None:
    """Pick the originating client address from proxy headers."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first[:_IP_MAX_LEN]
    if real_ip and real_ip.strip():
        return real_ip.strip()[:_IP_MAX_LEN]
    return None
