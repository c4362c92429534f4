"""
Repository for import job lifecycle persistence and status lookup.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, select, update
from sqlalchemy.orm import Session

from db.models.import_job import ImportJob, ImportJobKind, ImportJobStatus
from db.repositories.errors import ImportJobNotFoundError, ImportJobStateError


class ImportJobRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_job(
        self,
        *,
        filename: str,
        kind: str = ImportJobKind.SQL_DUMP,
        options: dict[str, Any] | None = None,
    ) -> ImportJob:
        job = ImportJob(
            kind=kind,
            filename=filename,
            status=ImportJobStatus.PENDING,
            options=options,
        )
        self._session.add(job)
        self._session.flush()
        self._session.refresh(job)
        return job

    def get_job(self, job_id: uuid.UUID) -> ImportJob | None:
        return self._session.get(ImportJob, job_id)

    def require_job(self, job_id: uuid.UUID) -> ImportJob:
        job = self.get_job(job_id)
        if job is None:
            raise ImportJobNotFoundError(f"Import job not found: {job_id}")
        return job

    def get_status(self, job_id: uuid.UUID) -> str | None:
        stmt = select(ImportJob.status).where(ImportJob.id == job_id)
        return self._session.scalar(stmt)

    def list_jobs(
        self,
        *,
        limit: int = 100,
        kind: str | None = None,
        status: str | None = None,
    ) -> list[ImportJob]:
        stmt: Select[tuple[ImportJob]] = select(ImportJob)

        if kind:
            stmt = stmt.where(ImportJob.kind == kind)
        if status:
            stmt = stmt.where(ImportJob.status == status)

        stmt = stmt.order_by(ImportJob.created_at.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def mark_processing(self, *, job_id: uuid.UUID) -> ImportJob:
        job = self.require_job(job_id)
        if job.status != ImportJobStatus.PENDING:
            raise ImportJobStateError(
                f"Import job {job_id} cannot start from status '{job.status}'"
            )
        job.status = ImportJobStatus.PROCESSING
        job.started_at = datetime.now(timezone.utc)
        job.completed_at = None
        job.error = None
        return job

    def update_progress(
        self,
        *,
        job_id: uuid.UUID,
        processed_records: int,
        total_records: int | None = None,
        error_count: int | None = None,
    ) -> None:
        """
        Write only the progress columns, without loading the job.
        """
        values: dict[str, Any] = {"processed_records": processed_records}
        if total_records is not None:
            values["total_records"] = total_records
        if error_count is not None:
            values["error_count"] = error_count

        self._session.execute(
            update(ImportJob)
            .where(ImportJob.id == job_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    def mark_completed(
        self,
        *,
        job_id: uuid.UUID,
        result: dict[str, Any],
        processed_records: int | None = None,
        error_count: int | None = None,
    ) -> ImportJob:
        job = self.require_job(job_id)
        job.status = ImportJobStatus.COMPLETED
        job.completed_at = datetime.now(timezone.utc)
        job.result = result
        job.error = None
        if processed_records is not None:
            job.processed_records = processed_records
        if error_count is not None:
            job.error_count = error_count
        return job

    def mark_failed(self, *, job_id: uuid.UUID, error: str) -> ImportJob:
        job = self.require_job(job_id)
        job.status = ImportJobStatus.FAILED
        job.completed_at = datetime.now(timezone.utc)
        job.error = error
        return job

    def mark_cancelled(self, *, job_id: uuid.UUID) -> ImportJob:
        job = self.require_job(job_id)
        job.status = ImportJobStatus.CANCELLED
        if job.completed_at is None:
            job.completed_at = datetime.now(timezone.utc)
        return job

    def request_cancel(self, *, job_id: uuid.UUID) -> ImportJob:
        """
        External cancellation; a running import observes it at its next check.
        """
        job = self.require_job(job_id)
        if job.is_terminal:
            raise ImportJobStateError(
                f"Import job {job_id} is already {job.status} and cannot be cancelled"
            )
        return self.mark_cancelled(job_id=job_id)
