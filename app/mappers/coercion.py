"""
app/mappers/coercion.py

Value coercions applied to projected legacy dump rows.

Legacy MySQL dumps are permissive: dates use the ``0000-00-00`` sentinel for
"no value", booleans come as ``1``/``0`` or ``YES``/``NO``, and numeric columns
occasionally carry free text. Every coercion here returns ``None`` (or a
documented default) instead of raising.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from legacy_dump.values import OpaqueValue

SENTINEL_DATETIMES: frozenset[str] = frozenset({"0000-00-00 00:00:00", "0000-00-00"})

DATETIME_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
)

_TRUE_VALUES = {"1", "yes", "true", "y", "on"}
_FALSE_VALUES = {"0", "no", "false", "n", "off"}


def is_blank(value: Any) -> bool:
    if value is None or isinstance(value, OpaqueValue):
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def clean_text(value: Any) -> str | None:
    """
    Trim a text value; blanks and binary payloads become ``None``.
    """

    if is_blank(value):
        return None
    return str(value).strip()


def is_sentinel_datetime(value: Any) -> bool:
    return isinstance(value, str) and value.strip() in SENTINEL_DATETIMES


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse a legacy timestamp into an aware UTC datetime.

    Accepts the MySQL formats, ISO-8601 and epoch seconds. Sentinel dates and
    anything unparseable yield ``None``.
    """

    if is_blank(value) or is_sentinel_datetime(value):
        return None

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _from_epoch(value)

    raw = str(value).strip()
    if raw.isdigit():
        return _from_epoch(int(raw))

    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(raw, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _from_epoch(seconds: float) -> datetime | None:
    if not math.isfinite(seconds) or seconds <= 0:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if is_blank(value):
        return None

    token = str(value).strip().lower()
    if token in _TRUE_VALUES:
        return True
    if token in _FALSE_VALUES:
        return False
    return None


def parse_optional_float(value: Any) -> float | None:
    """
    Numeric value as float; blanks and garbage become ``None``.
    """

    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif is_blank(value):
        return None
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def parse_required_float(value: Any) -> float:
    """
    Numeric value as float; blanks and garbage become ``0.0``.
    """

    number = parse_optional_float(value)
    return 0.0 if number is None else number


def parse_multiplier(value: Any) -> float:
    """
    Meter multiplier; empty, garbage or zero mean "no scaling" (``1.0``).
    """

    number = parse_required_float(value)
    return number if number != 0.0 else 1.0


def is_config_file_reference(value: str | None, extensions: tuple[str, ...]) -> bool:
    """
    True for dotted filenames such as ``ION6200.cfg``.
    """

    if not value or "." not in value:
        return False
    lowered = value.lower()
    return any(lowered.endswith(extension) for extension in extensions)
