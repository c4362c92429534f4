"""
tests/test_legacy_dump_parser.py

Parser, DumpStore accessors and row projection.
"""

from __future__ import annotations

import json
import logging

import pytest

from legacy_dump.parser import DumpParser, DumpReadError
from legacy_dump.projector import project_row
from legacy_dump.values import OPAQUE


@pytest.fixture()
def parser() -> DumpParser:
    return DumpParser()


class TestParseText:
    def test_row_counts_accumulate_across_statements(self, parser: DumpParser) -> None:
        content = (
            "INSERT INTO `meter_site` (`site_code`, `site_name`) VALUES ('A','a'),('B','b'),('C','c');\n"
            "INSERT INTO `meter_site` (`site_code`, `site_name`) VALUES "
            "('D','d'),('E','e'),('F','f'),('G','g');\n"
        )

        store = parser.parse_text(content)

        assert store.row_count("meter_site") == 7
        assert store.columns_of("meter_site") == ("site_code", "site_name")

    def test_row_separator_inside_string_does_not_split(self, parser: DumpParser) -> None:
        content = "INSERT INTO t (a, b) VALUES ('x),(y', 1),('z;', 2);"

        store = parser.parse_text(content)

        assert store.rows_of("t") == [{"a": "x),(y", "b": 1}, {"a": "z;", "b": 2}]

    def test_ignores_ddl_and_comments(self, parser: DumpParser, scenario_sql: str) -> None:
        store = parser.parse_text(scenario_sql)

        assert store.table_names() == ["meter_site", "user_tb", "meter_rtu", "meter_details", "meter_data"]
        assert store.total_rows() == 5

    def test_binary_payload_is_opaque(self, parser: DumpParser, scenario_sql: str) -> None:
        store = parser.parse_text(scenario_sql)

        [user] = store.rows_of("user_tb")
        assert user["user_name"] == "bob"
        assert user["user_password"] is OPAQUE

    def test_insert_ignore_and_bare_identifiers(self, parser: DumpParser) -> None:
        content = "insert ignore into meter_rtu (rtu_sn_number, mac_addr) values ('GW-9', 'CC:DD');"

        store = parser.parse_text(content)

        assert store.rows_of("meter_rtu") == [{"rtu_sn_number": "GW-9", "mac_addr": "CC:DD"}]

    def test_statement_without_column_list_reuses_known_columns(self, parser: DumpParser) -> None:
        content = (
            "INSERT INTO `t` (`a`, `b`) VALUES (1, 2);\n"
            "INSERT INTO `t` VALUES (3, 4);\n"
            "INSERT INTO `unknown` VALUES (5, 6);\n"
        )

        store = parser.parse_text(content)

        assert store.rows_of("t") == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]
        assert not store.has_table("unknown")

    def test_unterminated_statement_is_skipped(
        self,
        parser: DumpParser,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        content = (
            "INSERT INTO `broken` (`a`) VALUES ('never closed);\n"
        )

        with caplog.at_level(logging.WARNING):
            store = parser.parse_text(content)

        assert store.row_count("broken") == 0
        assert "unterminated" in caplog.text

    def test_good_statements_survive_a_bad_one(self, parser: DumpParser) -> None:
        content = (
            "INSERT INTO `t` VALUES (1);\n"
            "INSERT INTO `t` (`a`) VALUES (2);\n"
        )

        store = parser.parse_text(content)

        assert store.rows_of("t") == [{"a": 2}]

    def test_stray_quote_does_not_swallow_the_next_statement(
        self,
        parser: DumpParser,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        content = (
            "INSERT INTO a (x) VALUES ('it's');\n"
            "INSERT INTO b (y) VALUES ('O\\'Brien');\n"
        )

        with caplog.at_level(logging.WARNING):
            store = parser.parse_text(content)

        assert store.row_count("a") == 0
        assert store.rows_of("b") == [{"y": "O'Brien"}]
        assert "table=a" in caplog.text

    def test_escaped_newline_inside_string_is_data(self, parser: DumpParser) -> None:
        content = "INSERT INTO t (a) VALUES ('line one\\nINSERT two');\n"

        store = parser.parse_text(content)

        assert store.rows_of("t") == [{"a": "line onenINSERT two"}]

    def test_statistics_report_malformed_rows(self, parser: DumpParser) -> None:
        content = "INSERT INTO `t` (`a`, `b`) VALUES (1, 2),(3),(4, 5, 6);"

        stats = parser.parse_text(content).statistics()

        assert stats["t"] == {
            "columns": 2,
            "rows": 3,
            "column_names": ["a", "b"],
            "malformed_rows": 2,
        }


class TestDumpStoreAccessors:
    def test_sample_of_limits_rows(self, parser: DumpParser) -> None:
        store = parser.parse_text("INSERT INTO t (a) VALUES (1),(2),(3);")

        assert store.sample_of("t", 2) == [{"a": 1}, {"a": 2}]
        assert store.sample_of("t", 0) == []
        assert store.sample_of("missing", 5) == []

    def test_unknown_table_is_empty(self, parser: DumpParser) -> None:
        store = parser.parse_text("")

        assert store.table_names() == []
        assert store.row_count("t") == 0
        assert store.rows_of("t") == []
        assert store.columns_of("t") == ()

    def test_table_names_is_a_copy(self, parser: DumpParser) -> None:
        store = parser.parse_text("INSERT INTO t (a) VALUES (1);")

        store.table_names().append("other")

        assert store.table_names() == ["t"]

    def test_export_table_json(self, parser: DumpParser, scenario_sql: str, tmp_path) -> None:
        store = parser.parse_text(scenario_sql)
        output = tmp_path / "users.json"

        written = store.export_table_json("user_tb", output)

        assert written == 1
        exported = json.loads(output.read_text(encoding="utf-8"))
        assert exported[0]["user_real_name"] == "Bob Smith"
        assert exported[0]["user_password"] == "[BINARY]"


class TestParseFile:
    def test_missing_file_raises_read_error(self, parser: DumpParser, tmp_path) -> None:
        with pytest.raises(DumpReadError):
            parser.parse(tmp_path / "nope.sql")

    def test_read_error_is_an_os_error(self) -> None:
        assert issubclass(DumpReadError, OSError)

    def test_latin1_fallback(self, parser: DumpParser, write_dump) -> None:
        path = write_dump(
            "INSERT INTO `meter_site` (`site_code`, `site_name`) VALUES ('S1','Bogotá');",
            encoding="latin-1",
        )

        store = parser.parse(path)

        assert store.rows_of("meter_site") == [{"site_code": "S1", "site_name": "Bogotá"}]


class TestProjectRow:
    def test_short_row_is_padded_with_none(self) -> None:
        assert project_row(("a", "b", "c"), [1]) == {"a": 1, "b": None, "c": None}

    def test_long_row_is_truncated(self) -> None:
        assert project_row(("a",), [1, 2, 3]) == {"a": 1}

    def test_exact_row(self) -> None:
        assert project_row(("a", "b"), ["x", None]) == {"a": "x", "b": None}
