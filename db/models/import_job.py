"""
db/models/import_job.py

Import job record: lifecycle, progress counters and outcome of one
legacy data import.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, JSONPayload, TimestampMixin, as_utc


class ImportJobKind:
    SQL_DUMP = "sql_dump"
    CSV_IMPORT = "csv_import"


class ImportJobStatus:
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    TERMINAL = frozenset({COMPLETED, FAILED, CANCELLED})


class ImportJob(Base, TimestampMixin):
    __tablename__ = "import_jobs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    kind: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="sql_dump, csv_import",
    )
    filename: Mapped[str] = mapped_column(String(512), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ImportJobStatus.PENDING,
    )
    total_records: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processed_records: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    options: Mapped[dict[str, Any] | None] = mapped_column(
        JSONPayload,
        nullable=True,
        comment="Submitted import options",
    )
    result: Mapped[dict[str, Any] | None] = mapped_column(
        JSONPayload,
        nullable=True,
        comment="Per-entity counts of a completed import",
    )
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_import_jobs_status", "status"),
        Index("ix_import_jobs_created_at", "created_at"),
        Index("ix_import_jobs_kind_status", "kind", "status"),
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in ImportJobStatus.TERMINAL

    @property
    def progress_percentage(self) -> int:
        total = self.total_records or 0
        if total <= 0:
            return 0
        return round((self.processed_records or 0) / total * 100)

    @property
    def duration(self) -> str | None:
        """
        Elapsed time as ``"42s"``, ``"3m 12s"`` or ``"1h 5m"``.

        Measured up to ``completed_at``, or up to now while the job runs.
        """
        started = as_utc(self.started_at)
        if started is None:
            return None
        finished = as_utc(self.completed_at) or datetime.now(timezone.utc)
        seconds = max(0, int((finished - started).total_seconds()))

        if seconds < 60:
            return f"{seconds}s"
        if seconds < 3600:
            return f"{seconds // 60}m {seconds % 60}s"
        return f"{seconds // 3600}h {(seconds % 3600) // 60}m"

    def __repr__(self) -> str:
        return f"<ImportJob id={self.id} kind={self.kind!r} status={self.status!r}>"
