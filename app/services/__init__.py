"""
app/services package marker.
"""

from app.services.import_job_service import (
    SqlDumpImportJobService,
    get_sql_dump_import_job_service,
)
from app.services.import_progress import ImportCancelledError, ImportProgressReporter
from app.services.sql_dump_import_service import (
    SqlDumpImportService,
    get_sql_dump_import_service,
)

__all__ = [
    "ImportCancelledError",
    "ImportProgressReporter",
    "SqlDumpImportJobService",
    "get_sql_dump_import_job_service",
    "SqlDumpImportService",
    "get_sql_dump_import_service",
]
