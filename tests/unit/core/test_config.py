from __future__ import annotations

import pytest

from gradeup.core.config import _build_config
from gradeup.core.exceptions import ConfigurationError


def test_defaults_build(monkeypatch):
    monkeypatch.delenv("PLATFORM_FEE_PERCENT", raising=False)
    monkeypatch.delenv("SCORE_BATCH_LIMIT", raising=False)
    cfg = _build_config("development")
    assert cfg.PLATFORM_FEE_PERCENT == 12.0
    assert cfg.SCORE_BATCH_LIMIT == 100
    assert cfg.API_PREFIX.startswith("/")
    assert cfg.is_production is False


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("PLATFORM_FEE_PERCENT", "120"),
        ("SCORE_BATCH_LIMIT", "0"),
        ("SCORE_BATCH_LIMIT", "101"),
        ("SCORE_BATCH_WORKERS", "0"),
        ("SCORE_HISTORY_MAX", "lots"),
        ("API_PREFIX", "api"),
        ("LOG_LEVEL", "chatty"),
        ("DATABASE_URL", "mysql://db/gradeup"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        _build_config("development")


def test_production_rejects_placeholder_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "change_me_jwt_secret")
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_live")
    with pytest.raises(ConfigurationError, match="JWT_SECRET"):
        _build_config("production")


def test_production_requires_webhook_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "a-real-secret")
    monkeypatch.delenv("STRIPE_WEBHOOK_SECRET", raising=False)
    with pytest.raises(ConfigurationError, match="STRIPE_WEBHOOK_SECRET"):
        _build_config("production")
