"""
tests/test_import_jobs_router.py

HTTP surface of the import job endpoints, backed by a SQLite database.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.routers.import_jobs import router
from app.services.import_job_service import SqlDumpImportJobService, get_sql_dump_import_job_service
from db.models import ImportJobStatus
from db.session import get_db


@pytest.fixture()
def job_service(session_factory, import_settings, make_reporter) -> SqlDumpImportJobService:
    return SqlDumpImportJobService(
        session_factory=session_factory,
        settings=import_settings,
        reporter_factory=lambda job_id: make_reporter(),
    )


@pytest.fixture()
def client(session_factory, job_service) -> Iterator[TestClient]:
    app = FastAPI()
    app.include_router(router)

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_sql_dump_import_job_service] = lambda: job_service

    with TestClient(app) as test_client:
        yield test_client


class TestTriggerImport:
    def test_accepts_and_runs_in_background(self, client, scenario_dump) -> None:
        response = client.post("/imports/sql-dump", json={"file_path": str(scenario_dump)})

        assert response.status_code == 202
        body = response.json()
        assert body["status"] == ImportJobStatus.PENDING
        assert body["kind"] == "sql_dump"
        assert body["filename"] == "dump.sql"

        status_response = client.get(f"/imports/{body['job_id']}")
        assert status_response.status_code == 200
        job = status_response.json()
        assert job["status"] == ImportJobStatus.COMPLETED
        assert job["progress_percentage"] == 100
        assert job["processed_records"] == job["total_records"] == 5
        assert job["result"]["meters"] == 1
        assert job["duration"] is not None
        assert not scenario_dump.exists()

    def test_keep_file_option(self, client, scenario_dump) -> None:
        response = client.post(
            "/imports/sql-dump",
            json={"file_path": str(scenario_dump), "delete_source_file": False},
        )

        assert response.status_code == 202
        assert scenario_dump.exists()

    def test_missing_file_is_rejected(self, client, tmp_path) -> None:
        response = client.post("/imports/sql-dump", json={"file_path": str(tmp_path / "missing.sql")})

        assert response.status_code == 400
        assert client.get("/imports").json()["jobs"] == []

    def test_empty_path_fails_validation(self, client) -> None:
        response = client.post("/imports/sql-dump", json={"file_path": ""})

        assert response.status_code == 422


class TestJobQueries:
    def test_unknown_job(self, client) -> None:
        assert client.get(f"/imports/{uuid.uuid4()}").status_code == 404

    def test_list_filters_by_status(self, client, job_service, session_factory, scenario_dump, write_dump) -> None:
        client.post("/imports/sql-dump", json={"file_path": str(scenario_dump)})
        with session_factory() as db:
            job_service.create_job(db=db, file_path=str(write_dump("", name="queued.sql")))

        completed = client.get("/imports", params={"status": "completed"}).json()["jobs"]
        everything = client.get("/imports", params={"limit": 10}).json()["jobs"]

        assert [job["filename"] for job in completed] == ["dump.sql"]
        assert {job["filename"] for job in everything} == {"dump.sql", "queued.sql"}


class TestCancel:
    def test_cancel_pending_job(self, client, job_service, session_factory, scenario_dump) -> None:
        with session_factory() as db:
            job = job_service.create_job(db=db, file_path=str(scenario_dump))

        response = client.post(f"/imports/{job.id}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == ImportJobStatus.CANCELLED
        assert response.json()["completed_at"] is not None

    def test_cancel_finished_job_conflicts(self, client, scenario_dump) -> None:
        job_id = client.post("/imports/sql-dump", json={"file_path": str(scenario_dump)}).json()["job_id"]

        response = client.post(f"/imports/{job_id}/cancel")

        assert response.status_code == 409

    def test_cancel_unknown_job(self, client) -> None:
        assert client.post(f"/imports/{uuid.uuid4()}/cancel").status_code == 404
