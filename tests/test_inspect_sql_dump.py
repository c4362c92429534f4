from __future__ import annotations

import json

from scripts.inspect_sql_dump import main


class TestInspectSqlDump:
    def test_lists_tables_by_default(self, scenario_dump, capsys) -> None:
        assert main([str(scenario_dump)]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "meter_site\t1 rows",
            "user_tb\t1 rows",
            "meter_rtu\t1 rows",
            "meter_details\t1 rows",
            "meter_data\t1 rows",
        ]

    def test_stats(self, scenario_dump, capsys) -> None:
        assert main([str(scenario_dump), "--stats"]) == 0

        out = capsys.readouterr().out
        assert '"malformed_rows": 0' in out
        assert out.rstrip().endswith("Total rows: 5")

    def test_sample_masks_binary_payloads(self, scenario_dump, capsys) -> None:
        assert main([str(scenario_dump), "--sample", "user_tb", "--limit", "1"]) == 0

        rows = json.loads(capsys.readouterr().out)
        assert rows == [
            {"user_id": 1, "user_name": "bob", "user_real_name": "Bob Smith", "user_password": "[BINARY]"}
        ]

    def test_export(self, scenario_dump, tmp_path, capsys) -> None:
        output = tmp_path / "meters.json"

        assert main([str(scenario_dump), "--export", "meter_details", "--output", str(output)]) == 0

        assert "Exported 1 rows" in capsys.readouterr().out
        assert json.loads(output.read_text(encoding="utf-8"))[0]["meter_name"] == "M-1"

    def test_unknown_table(self, scenario_dump, capsys) -> None:
        assert main([str(scenario_dump), "--sample", "nope"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_unreadable_file(self, tmp_path, capsys) -> None:
        assert main([str(tmp_path / "missing.sql")]) == 1
        assert capsys.readouterr().err.startswith("error:")
