"""
app/config.py

Application-level configuration for the legacy dump import.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_csv_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Read a comma separated list, e.g. ``.cfg,.ini``.
    """

    raw_value = _get_str_env(name, "")
    if not raw_value:
        return default
    items = tuple(item.strip().lower() for item in raw_value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class LegacyImportSettings:
    """
    Runtime settings for the legacy SQL dump import.

    Table names refer to the legacy MySQL schema found in the dump.
    """

    organizations_table: str = "meter_site"
    users_table: str = "user_tb"
    gateways_table: str = "meter_rtu"
    meters_table: str = "meter_details"
    readings_table: str = "meter_data"

    progress_interval: int = 100
    reading_batch_size: int = 500

    default_organization_code: str = "DEFAULT"
    default_organization_name: str = "Default Organization"
    email_domain: str = "example.com"
    placeholder_password: str = "password"
    config_file_extensions: tuple[str, ...] = (".cfg",)

    delete_source_file: bool = True
    require_known_meter: bool = False

    @property
    def source_tables(self) -> tuple[str, ...]:
        return (
            self.organizations_table,
            self.users_table,
            self.gateways_table,
            self.meters_table,
            self.readings_table,
        )

    @property
    def required_tables(self) -> tuple[str, ...]:
        return (self.organizations_table, self.meters_table, self.users_table)


@dataclass(frozen=True)
class DumpValidationSettings:
    """
    Pre-import checks applied to dump files.
    """

    max_bytes: int = 50 * 1024 * 1024


@lru_cache(maxsize=1)
def get_legacy_import_settings() -> LegacyImportSettings:
    """
    Return cached legacy import settings from environment variables.
    """

    return LegacyImportSettings(
        organizations_table=_get_str_env("LEGACY_IMPORT_ORGANIZATIONS_TABLE", "meter_site"),
        users_table=_get_str_env("LEGACY_IMPORT_USERS_TABLE", "user_tb"),
        gateways_table=_get_str_env("LEGACY_IMPORT_GATEWAYS_TABLE", "meter_rtu"),
        meters_table=_get_str_env("LEGACY_IMPORT_METERS_TABLE", "meter_details"),
        readings_table=_get_str_env("LEGACY_IMPORT_READINGS_TABLE", "meter_data"),
        progress_interval=max(1, _get_int_env("LEGACY_IMPORT_PROGRESS_INTERVAL", 100)),
        reading_batch_size=max(1, _get_int_env("LEGACY_IMPORT_READING_BATCH_SIZE", 500)),
        default_organization_code=_get_str_env("LEGACY_IMPORT_DEFAULT_ORGANIZATION_CODE", "DEFAULT"),
        default_organization_name=_get_str_env(
            "LEGACY_IMPORT_DEFAULT_ORGANIZATION_NAME",
            "Default Organization",
        ),
        email_domain=_get_str_env("LEGACY_IMPORT_EMAIL_DOMAIN", "example.com"),
        placeholder_password=_get_str_env("LEGACY_IMPORT_PLACEHOLDER_PASSWORD", "password"),
        config_file_extensions=_get_csv_env("LEGACY_IMPORT_CONFIG_FILE_EXTENSIONS", (".cfg",)),
        delete_source_file=_get_bool_env("LEGACY_IMPORT_DELETE_SOURCE_FILE", True),
        require_known_meter=_get_bool_env("LEGACY_IMPORT_REQUIRE_KNOWN_METER", False),
    )


@lru_cache(maxsize=1)
def get_dump_validation_settings() -> DumpValidationSettings:
    max_megabytes = max(1, _get_int_env("SQL_DUMP_MAX_MEGABYTES", 50))
    return DumpValidationSettings(max_bytes=max_megabytes * 1024 * 1024)
