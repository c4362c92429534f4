"""
Legacy import job endpoints: trigger, status, listing and cancellation.
"""

from __future__ import annotations

from pathlib import Path
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.schemas.import_job import (
    ImportJobAcceptedResponse,
    ImportJobListResponse,
    ImportJobStatusResponse,
    SqlDumpImportRequest,
)
from app.services.import_job_service import (
    FastAPIBackgroundTaskExecutor,
    SqlDumpImportJobService,
    get_sql_dump_import_job_service,
)
from db.models.import_job import ImportJob
from db.repositories.errors import ImportJobNotFoundError, ImportJobStateError
from db.session import get_db

router = APIRouter(prefix="/imports", tags=["imports"])


@router.post(
    "/sql-dump",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ImportJobAcceptedResponse,
)
def trigger_sql_dump_import(
    payload: SqlDumpImportRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    service: SqlDumpImportJobService = Depends(get_sql_dump_import_job_service),
) -> ImportJobAcceptedResponse:
    if not Path(payload.file_path).is_file():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"SQL dump not found: {payload.file_path}",
        )

    options = {}
    if payload.delete_source_file is not None:
        options["delete_source_file"] = payload.delete_source_file

    job = service.trigger_import(
        db=db,
        executor=FastAPIBackgroundTaskExecutor(background_tasks),
        file_path=payload.file_path,
        options=options,
    )
    return ImportJobAcceptedResponse(
        job_id=job.id,
        kind=job.kind,
        filename=job.filename,
        status=job.status,
        created_at=job.created_at,
    )


@router.get("", response_model=ImportJobListResponse)
def list_import_jobs(
    kind: str | None = Query(default=None, description="Optional job kind filter"),
    status_filter: str | None = Query(default=None, alias="status", description="Optional status filter"),
    limit: int = Query(default=100, ge=1, le=500, description="Max jobs returned"),
    db: Session = Depends(get_db),
    service: SqlDumpImportJobService = Depends(get_sql_dump_import_job_service),
) -> ImportJobListResponse:
    jobs = service.list_jobs(db=db, limit=limit, kind=kind, status=status_filter)
    return ImportJobListResponse(jobs=[_to_status_response(job) for job in jobs])


@router.get("/{job_id}", response_model=ImportJobStatusResponse)
def get_import_job(
    job_id: UUID,
    db: Session = Depends(get_db),
    service: SqlDumpImportJobService = Depends(get_sql_dump_import_job_service),
) -> ImportJobStatusResponse:
    job = service.get_job(db=db, job_id=job_id)
    if job is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Import job not found: {job_id}",
        )
    return _to_status_response(job)


@router.post("/{job_id}/cancel", response_model=ImportJobStatusResponse)
def cancel_import_job(
    job_id: UUID,
    db: Session = Depends(get_db),
    service: SqlDumpImportJobService = Depends(get_sql_dump_import_job_service),
) -> ImportJobStatusResponse:
    try:
        job = service.request_cancel(db=db, job_id=job_id)
    except ImportJobNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ImportJobStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _to_status_response(job)


def _to_status_response(job: ImportJob) -> ImportJobStatusResponse:
    return ImportJobStatusResponse(
        job_id=job.id,
        kind=job.kind,
        filename=job.filename,
        status=job.status,
        total_records=job.total_records,
        processed_records=job.processed_records,
        error_count=job.error_count,
        progress_percentage=job.progress_percentage,
        duration=job.duration,
        created_at=job.created_at,
        updated_at=job.updated_at,
        started_at=job.started_at,
        completed_at=job.completed_at,
        options=job.options,
        result=job.result,
        error=job.error,
    )
