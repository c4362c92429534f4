"""
app/validators/sql_dump_validator.py

Pre-import screening of legacy SQL dump files.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from app.config import (
    DumpValidationSettings,
    LegacyImportSettings,
    get_dump_validation_settings,
    get_legacy_import_settings,
)
from legacy_dump.parser import DumpParser, DumpReadError, DumpStore

logger = logging.getLogger(__name__)

_INSERT_MARKER = re.compile(rb"INSERT\s+(?:IGNORE\s+)?INTO\s", re.IGNORECASE)
_SCAN_CHUNK_BYTES = 1024 * 1024
_SCAN_OVERLAP_BYTES = 256


class DumpValidationError(ValueError):
    """
    Raised when a dump cannot be imported; carries the collected errors.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid SQL dump")


@dataclass
class DumpValidationReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    statistics: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise DumpValidationError(self.errors)


class SqlDumpValidator:
    """
    Checks that a dump is readable, within limits and carries the master data
    tables an import needs.
    """

    def __init__(
        self,
        *,
        settings: DumpValidationSettings | None = None,
        import_settings: LegacyImportSettings | None = None,
        parser: DumpParser | None = None,
    ) -> None:
        self._settings = settings or get_dump_validation_settings()
        self._import_settings = import_settings or get_legacy_import_settings()
        self._parser = parser or DumpParser()

    def validate_file(self, file_path: str | Path) -> DumpValidationReport:
        report = DumpValidationReport()
        path = Path(file_path)

        if not path.is_file():
            report.errors.append(f"File not found: {path}")
            return report

        size = path.stat().st_size
        if size == 0:
            report.errors.append("File is empty")
            return report
        if size > self._settings.max_bytes:
            limit_mb = self._settings.max_bytes // (1024 * 1024)
            report.errors.append(f"File exceeds the {limit_mb} MB limit ({size} bytes)")
            return report

        if not self._contains_insert_statements(path):
            report.errors.append("File does not contain any INSERT INTO statements")
            return report

        try:
            store = self._parser.parse(path)
        except DumpReadError as exc:
            report.errors.append(str(exc))
            return report

        store_report = self.validate_store(store)
        report.errors.extend(store_report.errors)
        report.warnings.extend(store_report.warnings)
        report.statistics = store_report.statistics
        return report

    def validate_store(self, store: DumpStore) -> DumpValidationReport:
        report = DumpValidationReport(statistics=store.statistics())

        for table in self._import_settings.required_tables:
            if store.row_count(table) == 0:
                report.errors.append(f"Required table '{table}' has no rows")

        readings_table = self._import_settings.readings_table
        if store.row_count(readings_table) == 0:
            report.warnings.append(f"No telemetry rows found in '{readings_table}'")

        for table, stats in report.statistics.items():
            if stats["malformed_rows"]:
                report.warnings.append(
                    f"Table '{table}' has {stats['malformed_rows']} rows not matching its column list"
                )

        if report.errors:
            logger.info("SQL dump failed validation errors=%s", report.errors)
        return report

    @staticmethod
    def _contains_insert_statements(path: Path) -> bool:
        tail = b""
        with path.open("rb") as handle:
            while True:
                chunk = handle.read(_SCAN_CHUNK_BYTES)
                if not chunk:
                    return False
                window = tail + chunk
                if _INSERT_MARKER.search(window):
                    return True
                tail = window[-_SCAN_OVERLAP_BYTES:]
