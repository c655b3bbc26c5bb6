from __future__ import annotations

import json
import logging

from gradeup.core.logging_config import JsonFormatter


def test_json_formatter_includes_event_context():
    record = logging.LogRecord("gradeup.test", logging.INFO, __file__, 1, "contract.signed", None, None)
    record.event = "contract.signed"
    record.contract_id = "c-1"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["message"] == "contract.signed"
    assert payload["event"] == "contract.signed"
    assert payload["contract_id"] == "c-1"
    assert "athlete_id" not in payload
