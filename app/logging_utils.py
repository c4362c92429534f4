"""
Structured milestone logging for legacy dump imports.

Every line is compact JSON with an ``event`` under the ``legacy_import.``
namespace, an optional ``job_id`` and ``entity``, and integer counters.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

EVENT_PREFIX = "legacy_import."


def build_import_event(
    event: str,
    *,
    job_id: uuid.UUID | str | None = None,
    entity: str | None = None,
    **counters: int | None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"event": f"{EVENT_PREFIX}{event}"}
    if job_id is not None:
        payload["job_id"] = str(job_id)
    if entity is not None:
        payload["entity"] = entity
    # Unset counters are omitted.
    payload.update({name: value for name, value in counters.items() if value is not None})
    return payload


def log_import_event(
    logger: logging.Logger,
    event: str,
    *,
    job_id: uuid.UUID | str | None = None,
    entity: str | None = None,
    level: int = logging.INFO,
    **counters: int | None,
) -> None:
    """
    Emit one import milestone as a single JSON log line.
    """

    payload = build_import_event(event, job_id=job_id, entity=entity, **counters)
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
