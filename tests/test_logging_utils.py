from __future__ import annotations

import json
import logging
import uuid

import pytest

from app.logging_utils import build_import_event, log_import_event


def test_event_is_namespaced_and_unset_fields_are_dropped() -> None:
    payload = build_import_event("phase_completed", entity="meters", imported=3, skipped=0, errors=None)

    assert payload == {
        "event": "legacy_import.phase_completed",
        "entity": "meters",
        "imported": 3,
        "skipped": 0,
    }


def test_log_line_is_compact_json(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.import_events")
    job_id = uuid.uuid4()

    with caplog.at_level(logging.WARNING, logger="tests.import_events"):
        log_import_event(logger, "job_cancelled", job_id=job_id, level=logging.WARNING)
        log_import_event(logger, "job_created", job_id=job_id)

    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert json.loads(record.getMessage()) == {
        "event": "legacy_import.job_cancelled",
        "job_id": str(job_id),
    }
