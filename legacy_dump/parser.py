"""
legacy_dump/parser.py

Recover INSERT data from a raw, possibly hand-edited SQL dump.

Only ``INSERT INTO ... VALUES (...),(...);`` statements are interpreted;
DDL, comments and session statements are ignored. The whole dump is read
into memory once and materialized into an immutable ``DumpStore``.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from legacy_dump.projector import ProjectedRow, project_row
from legacy_dump.values import ScalarValue, lex_row

logger = logging.getLogger(__name__)

_INSERT_HEADER = re.compile(
    r"INSERT\s+(?:IGNORE\s+)?INTO\s+"
    r"(?P<table>`[^`]+`|\"[^\"]+\"|[A-Za-z0-9_$.]+)\s*"
    r"(?:\((?P<columns>[^)]*)\)\s*)?"
    r"VALUES\s*",
    re.IGNORECASE,
)
_IDENTIFIER_QUOTES = "`\" \t\r\n"

# Dump tools escape newlines inside strings, so a raw line break followed by
# another INSERT means an earlier quote was never closed.
_STATEMENT_START = re.compile(r"[ \t]*INSERT\s", re.IGNORECASE)


class DumpReadError(OSError):
    """
    Raised when the dump file is missing or cannot be read.
    """


@dataclass(frozen=True)
class DumpTable:
    """
    One table recovered from the dump: declared columns plus raw rows.
    """

    name: str
    columns: tuple[str, ...]
    rows: tuple[tuple[ScalarValue, ...], ...]

    @property
    def malformed_row_count(self) -> int:
        width = len(self.columns)
        return sum(1 for row in self.rows if len(row) != width)


class DumpStore:
    """
    Read-only mapping of table name to recovered table data.
    """

    def __init__(self, tables: dict[str, DumpTable]) -> None:
        self._tables = dict(tables)

    def table_names(self) -> list[str]:
        return list(self._tables)

    def has_table(self, table_name: str) -> bool:
        return table_name in self._tables

    def columns_of(self, table_name: str) -> tuple[str, ...]:
        table = self._tables.get(table_name)
        return table.columns if table is not None else ()

    def row_count(self, table_name: str) -> int:
        table = self._tables.get(table_name)
        return len(table.rows) if table is not None else 0

    def iter_rows(self, table_name: str) -> Iterator[ProjectedRow]:
        """
        Yield projected rows for one table in dump order.
        """

        table = self._tables.get(table_name)
        if table is None or not table.columns:
            return
        for values in table.rows:
            yield project_row(table.columns, values)

    def rows_of(self, table_name: str) -> list[ProjectedRow]:
        return list(self.iter_rows(table_name))

    def sample_of(self, table_name: str, limit: int = 10) -> list[ProjectedRow]:
        sample: list[ProjectedRow] = []
        if limit <= 0:
            return sample
        for row in self.iter_rows(table_name):
            sample.append(row)
            if len(sample) >= limit:
                break
        return sample

    def statistics(self) -> dict[str, dict[str, Any]]:
        """
        Per-table column and row counts, in first-seen order.
        """

        return {
            name: {
                "columns": len(table.columns),
                "rows": len(table.rows),
                "column_names": list(table.columns),
                "malformed_rows": table.malformed_row_count,
            }
            for name, table in self._tables.items()
        }

    def total_rows(self) -> int:
        return sum(len(table.rows) for table in self._tables.values())

    def export_table_json(self, table_name: str, output_path: str | Path) -> int:
        """
        Write one table's projected rows to a JSON file for inspection.

        Returns the number of rows written.
        """

        rows = self.rows_of(table_name)
        Path(output_path).write_text(
            json.dumps(rows, indent=2, default=str, ensure_ascii=False),
            encoding="utf-8",
        )
        return len(rows)


class DumpParser:
    """
    Scans dump text for INSERT statements and accumulates their rows per table.
    """

    def __init__(self, *, encodings: tuple[str, ...] = ("utf-8", "latin-1")) -> None:
        self._encodings = encodings

    def parse(self, file_path: str | Path) -> DumpStore:
        """
        Read and parse a dump file.

        Raises DumpReadError when the file cannot be read.
        """

        path = Path(file_path)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise DumpReadError(f"SQL dump file could not be read: {path} ({exc.strerror or exc})") from exc

        store = self.parse_text(self._decode(raw))
        logger.info(
            "Parsed SQL dump path=%s tables=%s rows=%d",
            path,
            store.table_names(),
            store.total_rows(),
        )
        return store

    def parse_text(self, content: str) -> DumpStore:
        columns_by_table: dict[str, tuple[str, ...]] = {}
        rows_by_table: dict[str, list[tuple[ScalarValue, ...]]] = {}

        position = 0
        while True:
            match = _INSERT_HEADER.search(content, position)
            if match is None:
                break

            table_name = _strip_identifier(match.group("table"))
            groups, statement_end, complete = _split_row_groups(content, match.end())
            if not complete:
                logger.warning(
                    "Skipping unterminated INSERT statement table=%s offset=%d",
                    table_name,
                    match.start(),
                )
                position = max(statement_end, match.end())
                continue
            position = statement_end

            raw_columns = match.group("columns")
            if raw_columns is not None:
                columns = tuple(
                    _strip_identifier(column) for column in raw_columns.split(",") if column.strip()
                )
            else:
                columns = columns_by_table.get(table_name, ())
            if not columns:
                logger.warning(
                    "Skipping INSERT statement without a known column list table=%s",
                    table_name,
                )
                continue

            if table_name not in columns_by_table:
                columns_by_table[table_name] = columns
                rows_by_table[table_name] = []
            rows_by_table[table_name].extend(tuple(lex_row(group)) for group in groups)

        return DumpStore(
            {
                name: DumpTable(
                    name=name,
                    columns=columns_by_table[name],
                    rows=tuple(rows_by_table[name]),
                )
                for name in columns_by_table
            }
        )

    def _decode(self, raw: bytes) -> str:
        for encoding in self._encodings[:-1]:
            try:
                return raw.decode(encoding)
            except UnicodeDecodeError:
                logger.info("SQL dump is not valid %s, trying next encoding", encoding)
        return raw.decode(self._encodings[-1], errors="replace")


def _strip_identifier(identifier: str) -> str:
    return identifier.strip(_IDENTIFIER_QUOTES)


def _split_row_groups(content: str, start: int) -> tuple[list[str], int, bool]:
    """
    Split a VALUES tail into row bodies at top-level parentheses.

    Quotes and backslash escapes are tracked, so ``),(`` inside a string
    does not split a row. Stops after the first top-level ``;``, or reports
    the statement incomplete at a line starting a new INSERT while a quote
    is still open.
    Returns (row bodies, end offset, statement complete).
    """

    groups: list[str] = []
    depth = 0
    in_quote = False
    group_start: int | None = None
    position = start
    length = len(content)

    while position < length:
        char = content[position]
        if in_quote:
            if char == "\\":
                position += 2
                continue
            if char == "\n" and _STATEMENT_START.match(content, position + 1):
                return groups, position + 1, False
            if char == "'":
                if position + 1 < length and content[position + 1] == "'":
                    position += 2
                    continue
                in_quote = False
        elif char == "'":
            in_quote = True
        elif char == "(":
            if depth == 0:
                group_start = position + 1
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0 and group_start is not None:
                groups.append(content[group_start:position])
                group_start = None
            elif depth < 0:
                depth = 0
        elif char == ";" and depth == 0:
            return groups, position + 1, True
        position += 1

    # A final statement missing only its terminator is still usable.
    return groups, length, not in_quote and depth == 0
