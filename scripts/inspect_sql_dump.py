"""
Inspect a legacy SQL dump without importing it.
"""

from __future__ import annotations

import argparse
import json
import sys

from legacy_dump.parser import DumpParser, DumpReadError, DumpStore


def _print_tables(store: DumpStore) -> None:
    for name in store.table_names():
        print(f"{name}\t{store.row_count(name)} rows")


def _print_statistics(store: DumpStore) -> None:
    statistics = store.statistics()
    print(json.dumps(statistics, indent=2))
    print(f"Total rows: {store.total_rows()}")


def _print_sample(store: DumpStore, table: str, limit: int) -> int:
    if not store.has_table(table):
        print(f"error: table '{table}' not found in dump", file=sys.stderr)
        return 1
    rows = store.sample_of(table, limit)
    print(json.dumps(rows, indent=2, default=str, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect a legacy meter SQL dump.")
    parser.add_argument("file", help="Path to the SQL dump file.")
    parser.add_argument("--tables", action="store_true", help="List tables with row counts.")
    parser.add_argument("--stats", action="store_true", help="Print per-table statistics as JSON.")
    parser.add_argument("--sample", metavar="TABLE", help="Print sample rows of one table.")
    parser.add_argument("--limit", type=int, default=5, help="Number of sample rows (default: 5).")
    parser.add_argument("--export", metavar="TABLE", help="Export one table to JSON.")
    parser.add_argument("--output", help="Output path for --export (default: <table>.json).")
    args = parser.parse_args(argv)

    try:
        store = DumpParser().parse(args.file)
    except DumpReadError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.sample:
        return _print_sample(store, args.sample, args.limit)

    if args.export:
        if not store.has_table(args.export):
            print(f"error: table '{args.export}' not found in dump", file=sys.stderr)
            return 1
        output = args.output or f"{args.export}.json"
        written = store.export_table_json(args.export, output)
        print(f"Exported {written} rows from {args.export} to {output}")
        return 0

    if args.stats:
        _print_statistics(store)
        return 0

    _print_tables(store)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
