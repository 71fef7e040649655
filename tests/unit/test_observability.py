from __future__ import annotations

import json
import logging

from solution_review.observability import JsonFormatter


def test_json_formatter_merges_structured_fields() -> None:
    record = logging.LogRecord("solution_review", logging.WARNING, __file__, 1, "submission.view_failed", None, None)
    record.extra_data = {"submission_id": 7, "user_id": 3}

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["message"] == "submission.view_failed"
    assert payload["submission_id"] == 7
    assert payload["user_id"] == 3
    assert "ts" in payload
