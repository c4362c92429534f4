"""
Schemas for legacy import trigger, status and cancellation endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class SqlDumpImportRequest(BaseModel):
    file_path: str = Field(min_length=1, description="Server-side path of the SQL dump to import")
    delete_source_file: bool | None = Field(
        default=None,
        description="Delete the dump once the job finishes; defaults to server configuration",
    )


class ImportJobAcceptedResponse(BaseModel):
    job_id: UUID
    kind: str
    filename: str
    status: str
    created_at: datetime


class ImportJobStatusResponse(BaseModel):
    job_id: UUID
    kind: str
    filename: str
    status: str
    total_records: int
    processed_records: int
    error_count: int
    progress_percentage: int
    duration: str | None = None
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    options: dict[str, Any] | None = None
    result: dict[str, Any] | None = None
    error: str | None = None


class ImportJobListResponse(BaseModel):
    jobs: list[ImportJobStatusResponse] = Field(default_factory=list)
