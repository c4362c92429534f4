"""
Progress reporting and cancellation checks for long-running imports.

The import service never touches the job record directly; it reports through
an ``ImportProgressReporter`` at fixed checkpoints.
"""

from __future__ import annotations

import logging
import uuid
from typing import Protocol

from sqlalchemy.orm import Session, sessionmaker

from db.models.import_job import ImportJobStatus
from db.repositories.import_job_repository import ImportJobRepository

logger = logging.getLogger(__name__)


class ImportCancelledError(Exception):
    """Raised inside the import transaction once cancellation is observed."""


class ImportProgressReporter(Protocol):
    def report(self, processed: int, total: int, errors: int) -> None:
        ...

    def is_cancelled(self) -> bool:
        ...


class NullProgressReporter:
    def report(self, processed: int, total: int, errors: int) -> None:
        return None

    def is_cancelled(self) -> bool:
        return False


class ImportJobProgressReporter:
    """
    Writes progress to the job row in short transactions of its own, so
    readers see it while the import transaction is still open.
    """

    def __init__(self, *, session_factory: sessionmaker[Session], job_id: uuid.UUID) -> None:
        self._session_factory = session_factory
        self._job_id = job_id

    def report(self, processed: int, total: int, errors: int) -> None:
        with self._session_factory() as db, db.begin():
            ImportJobRepository(db).update_progress(
                job_id=self._job_id,
                processed_records=processed,
                total_records=total,
                error_count=errors,
            )
        logger.debug(
            "Import progress job_id=%s processed=%s total=%s errors=%s",
            self._job_id,
            processed,
            total,
            errors,
        )

    def is_cancelled(self) -> bool:
        with self._session_factory() as db:
            status = ImportJobRepository(db).get_status(self._job_id)
        return status == ImportJobStatus.CANCELLED
