"""
tests/test_import_progress.py

Job-backed progress reporter against a real job row.
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from app.config import LegacyImportSettings
from app.services.import_progress import ImportCancelledError, ImportJobProgressReporter
from app.services.sql_dump_import_service import SqlDumpImportService
from db.models import MeterReading
from db.models.import_job import ImportJobStatus
from db.repositories.import_job_repository import ImportJobRepository
from db.repositories.meter_repository import MeterRepository
from legacy_dump.parser import DumpParser


def _processing_job(session_factory: sessionmaker[Session]) -> uuid.UUID:
    with session_factory() as db, db.begin():
        repository = ImportJobRepository(db)
        job = repository.create_job(filename="dump.sql")
        repository.mark_processing(job_id=job.id)
        return job.id


def _cancel(session_factory: sessionmaker[Session], job_id: uuid.UUID) -> None:
    with session_factory() as db, db.begin():
        ImportJobRepository(db).request_cancel(job_id=job_id)


class TestImportJobProgressReporter:
    def test_report_writes_progress_to_the_job_row(self, session_factory) -> None:
        job_id = _processing_job(session_factory)
        reporter = ImportJobProgressReporter(session_factory=session_factory, job_id=job_id)

        reporter.report(3, 10, 1)

        with session_factory() as db:
            job = ImportJobRepository(db).require_job(job_id)
            assert job.processed_records == 3
            assert job.total_records == 10
            assert job.error_count == 1
            assert job.progress_percentage == 30
            assert job.status == ImportJobStatus.PROCESSING

    def test_external_cancel_is_observed(self, session_factory) -> None:
        job_id = _processing_job(session_factory)
        reporter = ImportJobProgressReporter(session_factory=session_factory, job_id=job_id)

        assert not reporter.is_cancelled()
        _cancel(session_factory, job_id)
        assert reporter.is_cancelled()

    def test_unknown_job_is_not_cancelled(self, session_factory) -> None:
        reporter = ImportJobProgressReporter(session_factory=session_factory, job_id=uuid.uuid4())

        assert not reporter.is_cancelled()


class TestCancelDuringImport:
    def test_cancel_from_another_session_stops_the_running_import(
        self,
        session_factory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        content = "".join(
            "INSERT INTO `meter_data` (`id`, `datetime`, `meter_id`, `location`, `vrms_a`) "
            f"VALUES ({row_id},'2020-01-01 0{row_id}:00:00','M-1','Feeder A',230.0);\n"
            for row_id in range(1, 5)
        )
        store = DumpParser().parse_text(content)
        service = SqlDumpImportService(settings=LegacyImportSettings(progress_interval=2, reading_batch_size=50))
        job_id = _processing_job(session_factory)
        reporter = ImportJobProgressReporter(session_factory=session_factory, job_id=job_id)

        def cancel_then_lookup(self) -> dict[str, int]:
            _cancel(session_factory, job_id)
            return {}

        monkeypatch.setattr(MeterRepository, "ids_by_name", cancel_then_lookup)

        with pytest.raises(ImportCancelledError):
            with session_factory() as db, db.begin():
                service.import_store(store, db=db, reporter=reporter)

        with session_factory() as db:
            job = ImportJobRepository(db).require_job(job_id)
            assert job.status == ImportJobStatus.CANCELLED
            assert job.processed_records == 2
            assert job.total_records == 4
            assert db.scalar(select(func.count()).select_from(MeterReading)) == 0
