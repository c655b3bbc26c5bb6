"""JSON log lines for the API process.

Services log a dotted event name as the message and pass identifiers through
``extra``; the formatter lifts the known identifiers into top-level keys so
log search can filter on ``contract_id`` or ``athlete_id`` directly.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from gradeup.core.config import Config, get_config

CONTEXT_FIELDS = ("event", "contract_id", "athlete_id", "deal_id", "party_type", "status", "user_id")

# Third-party loggers that are too chatty outside development.
QUIET_LOGGERS = ("sqlalchemy.engine", "stripe", "httpx")

_HANDLER_NAME = "gradeup.json"


class JsonFormatter(logging.Formatter):
    def __init__(self, service: str | None = None) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.service:
            payload["service"] = self.service
        payload.update(
            {name: str(getattr(record, name)) for name in CONTEXT_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def _build_handlers(config: Config) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.LOG_FILE:
        handlers.append(logging.FileHandler(config.LOG_FILE))
    formatter = JsonFormatter(service=config.APP_NAME)
    for handler in handlers:
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(formatter)
    return handlers


def configure_logging(config: Config | None = None) -> None:
    """Attach the JSON handlers to the root logger; repeated calls are no-ops."""
    cfg = config or get_config()
    root = logging.getLogger()
    if any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        return

    root.setLevel(cfg.LOG_LEVEL)
    for handler in _build_handlers(cfg):
        root.addHandler(handler)

    if not cfg.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
