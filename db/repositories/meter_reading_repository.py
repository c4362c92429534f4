"""
Append-only bulk persistence for meter readings.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import insert
from sqlalchemy.orm import Session

from db.models.meter_reading import MeterReading


class MeterReadingRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def bulk_insert(self, rows: Sequence[dict[str, Any]], *, batch_size: int = 500) -> int:
        """
        Insert reading rows in chunks with a core INSERT instead of per-row ORM adds.

        Readings are never deduplicated here.
        """
        if not rows:
            return 0

        for chunk_start in range(0, len(rows), batch_size):
            chunk = rows[chunk_start : chunk_start + batch_size]
            self._session.execute(insert(MeterReading), list(chunk))

        return len(rows)
