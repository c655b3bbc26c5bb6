from __future__ import annotations

import logging
from dataclasses import replace

import pytest

import gradeup.core.startup as startup_module
from gradeup.core.config import get_config


def _config(**overrides):
    return replace(get_config(), **overrides)


def test_optional_database_outage_only_warns(monkeypatch, caplog):
    monkeypatch.setattr(startup_module, "get_config", lambda: _config(DB_CONNECTIVITY_REQUIRED=False))
    monkeypatch.setattr(startup_module, "verify_database_connection", lambda: False)

    with caplog.at_level(logging.WARNING, logger="gradeup.core.startup"):
        startup_module.validate_startup_config()
    assert "startup.database.connectivity_optional_failed" in caplog.messages


def test_required_database_outage_raises(monkeypatch):
    monkeypatch.setattr(startup_module, "get_config", lambda: _config(DB_CONNECTIVITY_REQUIRED=True))
    monkeypatch.setattr(startup_module, "verify_database_connection", lambda: False)

    with pytest.raises(RuntimeError, match="Database connectivity check failed"):
        startup_module.validate_startup_config()


def test_missing_stripe_key_is_reported(monkeypatch, caplog):
    monkeypatch.setattr(startup_module, "get_config", lambda: _config(STRIPE_SECRET_KEY=None))
    monkeypatch.setattr(startup_module, "verify_database_connection", lambda: True)

    with caplog.at_level(logging.INFO, logger="gradeup.core.startup"):
        startup_module.validate_startup_config()
    assert "startup.stripe.not_configured" in caplog.messages
    assert any(message.startswith("startup.config.validated") for message in caplog.messages)


def test_production_on_sqlite_is_flagged():
    production = _config(ENV="production", STRIPE_SECRET_KEY="sk_live_x")
    assert startup_module._deployment_warnings(production, "sqlite") == ["startup.production.sqlite_detected"]
    assert startup_module._deployment_warnings(production, "postgresql") == []
