"""
app/schemas package marker.
"""

from app.schemas.import_job import (
    ImportJobAcceptedResponse,
    ImportJobListResponse,
    ImportJobStatusResponse,
    SqlDumpImportRequest,
)

__all__ = [
    "ImportJobAcceptedResponse",
    "ImportJobListResponse",
    "ImportJobStatusResponse",
    "SqlDumpImportRequest",
]
