"""
Job runner for legacy SQL dump imports: dispatch, lifecycle and cleanup.
"""

from __future__ import annotations

import logging
import os
import uuid
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session, sessionmaker

from app.config import LegacyImportSettings, get_legacy_import_settings
from app.domain.legacy_import import ImportResult
from app.logging_utils import log_import_event
from app.services.import_progress import (
    ImportCancelledError,
    ImportJobProgressReporter,
    ImportProgressReporter,
)
from app.services.sql_dump_import_service import SqlDumpImportService
from app.validators.sql_dump_validator import SqlDumpValidator
from db.models.import_job import ImportJob, ImportJobKind, ImportJobStatus
from db.repositories.errors import ImportJobNotFoundError
from db.repositories.import_job_repository import ImportJobRepository
from legacy_dump.parser import DumpParser

logger = logging.getLogger(__name__)

ReporterFactory = Callable[[uuid.UUID], ImportProgressReporter]


class ImportTaskExecutor(Protocol):
    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        ...


class FastAPIBackgroundTaskExecutor:
    def __init__(self, background_tasks: BackgroundTasks) -> None:
        self._background_tasks = background_tasks

    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        self._background_tasks.add_task(task, *args, **kwargs)


class InlineTaskExecutor:
    """
    Runs the task immediately in the calling thread (CLI use).
    """

    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        task(*args, **kwargs)


class SqlDumpImportJobService:
    """
    Owns the import job record for one dump: pending, processing, then
    completed, failed or cancelled.

    The job row is written in short transactions of its own; the import
    itself runs in a separate session inside a single transaction.
    """

    def __init__(
        self,
        *,
        session_factory: sessionmaker[Session] | None = None,
        import_service: SqlDumpImportService | None = None,
        parser: DumpParser | None = None,
        validator: SqlDumpValidator | None = None,
        settings: LegacyImportSettings | None = None,
        reporter_factory: ReporterFactory | None = None,
    ) -> None:
        if session_factory is None:
            from db.session import SessionLocal

            self._session_factory = SessionLocal
        else:
            self._session_factory = session_factory

        self._settings = settings or get_legacy_import_settings()
        self._import_service = import_service or SqlDumpImportService(settings=self._settings)
        self._parser = parser or DumpParser()
        self._validator = validator or SqlDumpValidator(import_settings=self._settings)
        self._reporter_factory = reporter_factory or self._default_reporter

    def create_job(
        self,
        *,
        db: Session,
        file_path: str,
        options: dict[str, Any] | None = None,
    ) -> ImportJob:
        job_options = {"file_path": str(file_path), **(options or {})}
        repository = ImportJobRepository(db)
        with db.begin():
            job = repository.create_job(
                kind=ImportJobKind.SQL_DUMP,
                filename=Path(file_path).name,
                options=job_options,
            )
        log_import_event(logger, "job_created", job_id=job.id)
        return job

    def trigger_import(
        self,
        *,
        db: Session,
        executor: ImportTaskExecutor,
        file_path: str,
        options: dict[str, Any] | None = None,
    ) -> ImportJob:
        job = self.create_job(db=db, file_path=file_path, options=options)

        try:
            executor.submit(self.run_job, job.id, str(file_path))
        except Exception:
            with db.begin():
                ImportJobRepository(db).mark_failed(
                    job_id=job.id,
                    error="Failed to schedule SQL dump import job.",
                )
            raise

        return job

    def run_job(self, job_id: uuid.UUID, file_path: str) -> None:
        delete_source_file = self._settings.delete_source_file
        try:
            with self._session_factory() as db, db.begin():
                repository = ImportJobRepository(db)
                job = repository.require_job(job_id)
                delete_source_file = bool(
                    (job.options or {}).get("delete_source_file", self._settings.delete_source_file)
                )
                if job.status != ImportJobStatus.PENDING:
                    logger.info("Import job not started id=%s status=%s", job_id, job.status)
                    return
                repository.mark_processing(job_id=job_id)

            self._execute(job_id, file_path)
        except ImportJobNotFoundError:
            logger.error("Import job not found id=%s", job_id)
        finally:
            if delete_source_file:
                self._delete_file_quietly(file_path)

    def request_cancel(self, *, db: Session, job_id: uuid.UUID) -> ImportJob:
        """
        Cancel a pending or processing job.

        Raises ``ImportJobNotFoundError`` or ``ImportJobStateError``.
        """
        repository = ImportJobRepository(db)
        with db.begin():
            job = repository.request_cancel(job_id=job_id)
        log_import_event(logger, "job_cancel_requested", job_id=job_id)
        return job

    def get_job(self, *, db: Session, job_id: uuid.UUID) -> ImportJob | None:
        return ImportJobRepository(db).get_job(job_id)

    def list_jobs(
        self,
        *,
        db: Session,
        limit: int = 100,
        kind: str | None = None,
        status: str | None = None,
    ) -> list[ImportJob]:
        return ImportJobRepository(db).list_jobs(limit=limit, kind=kind, status=status)

    def _execute(self, job_id: uuid.UUID, file_path: str) -> None:
        try:
            store = self._parser.parse(file_path)
            self._validator.validate_store(store).raise_for_errors()

            total = self._import_service.count_source_rows(store)
            with self._session_factory() as db, db.begin():
                ImportJobRepository(db).update_progress(
                    job_id=job_id,
                    processed_records=0,
                    total_records=total,
                    error_count=0,
                )

            reporter = self._reporter_factory(job_id)
            with self._session_factory() as work_db:
                with work_db.begin():
                    result = self._import_service.import_store(store, db=work_db, reporter=reporter)
        except ImportCancelledError:
            self._mark_job_cancelled(job_id)
        except Exception as exc:
            self._mark_job_failed(job_id=job_id, exc=exc)
        else:
            self._mark_job_completed(job_id=job_id, result=result, total=total)

    def _mark_job_completed(self, *, job_id: uuid.UUID, result: ImportResult, total: int) -> None:
        with self._session_factory() as db, db.begin():
            ImportJobRepository(db).mark_completed(
                job_id=job_id,
                result=result.to_payload(),
                processed_records=total,
                error_count=result.errors,
            )
        log_import_event(logger, "job_completed", job_id=job_id, errors=result.errors, **result.counts)

    def _mark_job_cancelled(self, job_id: uuid.UUID) -> None:
        with self._session_factory() as db, db.begin():
            ImportJobRepository(db).mark_cancelled(job_id=job_id)
        log_import_event(logger, "job_cancelled", job_id=job_id, level=logging.WARNING)

    def _mark_job_failed(self, *, job_id: uuid.UUID, exc: Exception) -> None:
        error_message = f"{type(exc).__name__}: {exc}"
        logger.exception("Import job failed id=%s error=%s", job_id, error_message)
        with self._session_factory() as db:
            try:
                ImportJobRepository(db).mark_failed(job_id=job_id, error=error_message[:2000])
                db.commit()
            except Exception:
                db.rollback()
                logger.exception("Failed to persist failed import job state id=%s", job_id)

    def _default_reporter(self, job_id: uuid.UUID) -> ImportProgressReporter:
        return ImportJobProgressReporter(session_factory=self._session_factory, job_id=job_id)

    def _delete_file_quietly(self, file_path: str) -> None:
        try:
            os.remove(file_path)
        except OSError:
            return


@lru_cache(maxsize=1)
def get_sql_dump_import_job_service() -> SqlDumpImportJobService:
    return SqlDumpImportJobService()
