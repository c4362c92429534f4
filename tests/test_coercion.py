from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.mappers.coercion import (
    clean_text,
    is_config_file_reference,
    parse_bool,
    parse_datetime,
    parse_multiplier,
    parse_optional_float,
    parse_required_float,
)
from legacy_dump.values import OPAQUE

UTC = timezone.utc


class TestParseDatetime:
    @pytest.mark.parametrize("value", ["0000-00-00 00:00:00", "0000-00-00", " 0000-00-00 ", None, "", OPAQUE])
    def test_sentinel_and_blank_values_are_none(self, value) -> None:
        assert parse_datetime(value) is None

    @pytest.mark.parametrize(
        "value",
        [
            "2020-01-01 00:15:00",
            "2020/01/01 00:15:00",
            "2020-01-01T00:15:00",
            "2020-01-01T00:15:00Z",
            "2020-01-01 00:15",
        ],
    )
    def test_supported_formats(self, value: str) -> None:
        assert parse_datetime(value) == datetime(2020, 1, 1, 0, 15, tzinfo=UTC)

    def test_date_only(self) -> None:
        assert parse_datetime("2020-01-01") == datetime(2020, 1, 1, tzinfo=UTC)

    def test_epoch_seconds(self) -> None:
        assert parse_datetime(1577837700) == datetime(2020, 1, 1, 0, 15, tzinfo=UTC)
        assert parse_datetime("1577837700") == datetime(2020, 1, 1, 0, 15, tzinfo=UTC)

    def test_offsets_are_converted_to_utc(self) -> None:
        parsed = parse_datetime("2020-01-01T02:15:00+02:00")

        assert parsed == datetime(2020, 1, 1, 0, 15, tzinfo=UTC)
        assert parsed.utcoffset() == timedelta(0)

    def test_garbage_is_none(self) -> None:
        assert parse_datetime("yesterday") is None
        assert parse_datetime(0) is None


class TestParseBool:
    @pytest.mark.parametrize("value", ["1", "YES", "yes", "True", "Y", "on", 1, 2.0])
    def test_truthy(self, value) -> None:
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "NO", "false", "n", "OFF", 0])
    def test_falsy(self, value) -> None:
        assert parse_bool(value) is False

    @pytest.mark.parametrize("value", [None, "", "  ", "maybe", OPAQUE])
    def test_unknown_is_none(self, value) -> None:
        assert parse_bool(value) is None


class TestNumbers:
    def test_optional_float(self) -> None:
        assert parse_optional_float(5) == 5.0
        assert parse_optional_float(" 2.5 ") == 2.5
        assert parse_optional_float("abc") is None
        assert parse_optional_float("") is None
        assert parse_optional_float(None) is None
        assert parse_optional_float("nan") is None

    def test_required_float_never_fails(self) -> None:
        assert parse_required_float("12.5") == 12.5
        assert parse_required_float("garbage") == 0.0
        assert parse_required_float(None) == 0.0

    @pytest.mark.parametrize("value", [None, "", "0", 0, "abc", 0.0])
    def test_multiplier_defaults_to_one(self, value) -> None:
        assert parse_multiplier(value) == 1.0

    def test_multiplier_keeps_real_values(self) -> None:
        assert parse_multiplier("40") == 40.0
        assert parse_multiplier(0.5) == 0.5


class TestText:
    def test_clean_text(self) -> None:
        assert clean_text("  M-1 ") == "M-1"
        assert clean_text("   ") is None
        assert clean_text(None) is None
        assert clean_text(OPAQUE) is None
        assert clean_text(42) == "42"

    def test_config_file_reference(self) -> None:
        assert is_config_file_reference("ION6200.cfg", (".cfg",))
        assert is_config_file_reference("ION6200.CFG", (".cfg",))
        assert not is_config_file_reference("ION6200", (".cfg",))
        assert not is_config_file_reference("cfg", (".cfg",))
        assert not is_config_file_reference(None, (".cfg",))
