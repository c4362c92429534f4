"""
app/validators package marker.
"""

from app.validators.sql_dump_validator import DumpValidationError, DumpValidationReport, SqlDumpValidator

__all__ = [
    "DumpValidationError",
    "DumpValidationReport",
    "SqlDumpValidator",
]
