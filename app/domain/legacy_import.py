"""
app/domain/legacy_import.py

Domain models for the legacy SQL dump import.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class OrganizationDraft:
    code: str
    name: str
    last_log_update: datetime | None = None


@dataclass(frozen=True)
class UserDraft:
    email: str
    name: str
    username: str | None = None


@dataclass(frozen=True)
class GatewayDraft:
    serial_number: str
    mac_address: str
    ip_address: str
    site_code: str | None = None
    software_version: str | None = None
    last_log_update: datetime | None = None


@dataclass(frozen=True)
class MeterDraft:
    """
    Normalized meter row; ``attributes`` holds the plain column values.
    """

    name: str
    site_code: str | None
    gateway_serial: str | None
    configuration_file: str | None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ReadingDraft:
    meter_name: str
    location: str
    reading_at: datetime
    measurements: dict[str, Any] = field(default_factory=dict)


@dataclass
class ImportResult:
    """
    Per-entity outcome of one import run.

    ``counts`` are rows applied to the destination; ``skipped`` are rows
    dropped for an unusable natural key or an unresolved parent.
    """

    counts: dict[str, int] = field(
        default_factory=lambda: {
            "organizations": 0,
            "users": 0,
            "gateways": 0,
            "meters": 0,
            "readings": 0,
        }
    )
    skipped: dict[str, int] = field(
        default_factory=lambda: {
            "organizations": 0,
            "users": 0,
            "gateways": 0,
            "meters": 0,
            "readings": 0,
        }
    )
    errors: int = 0

    def to_payload(self) -> dict[str, Any]:
        return {**self.counts, "skipped": dict(self.skipped), "errors": self.errors}
