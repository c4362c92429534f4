"""
Import a legacy SQL dump from the CLI.

Runs the job inline and prints the final job record as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from app.services.import_job_service import InlineTaskExecutor, SqlDumpImportJobService
from app.validators.sql_dump_validator import SqlDumpValidator
from db.models.import_job import ImportJobStatus
from db.session import SessionLocal


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import a legacy meter SQL dump.")
    parser.add_argument("file", help="Path to the SQL dump file.")
    parser.add_argument(
        "--keep-file",
        action="store_true",
        help="Do not delete the dump after the import finishes.",
    )
    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Skip the pre-import file checks (size limit, INSERT statements).",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    if not args.skip_validation:
        report = SqlDumpValidator().validate_file(args.file)
        for warning in report.warnings:
            print(f"warning: {warning}", file=sys.stderr)
        if not report.is_valid:
            for error in report.errors:
                print(f"error: {error}", file=sys.stderr)
            return 1

    service = SqlDumpImportJobService()
    with SessionLocal() as db:
        job = service.trigger_import(
            db=db,
            executor=InlineTaskExecutor(),
            file_path=args.file,
            options={"delete_source_file": not args.keep_file},
        )

    # Fresh session: the job row was finalized by the runner's own sessions.
    with SessionLocal() as db:
        final_job = service.get_job(db=db, job_id=job.id)

    if final_job is None:
        print(f"error: import job {job.id} disappeared", file=sys.stderr)
        return 1

    payload = {
        "job_id": str(final_job.id),
        "status": final_job.status,
        "total_records": final_job.total_records,
        "processed_records": final_job.processed_records,
        "error_count": final_job.error_count,
        "duration": final_job.duration,
        "result": final_job.result,
        "error": final_job.error,
    }
    print(json.dumps(payload, indent=2))
    return 0 if final_job.status == ImportJobStatus.COMPLETED else 1


if __name__ == "__main__":
    raise SystemExit(main())
