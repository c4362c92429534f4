"""
app/mappers/legacy_field_mapper.py

Table-driven mapping from projected legacy rows to import drafts.

Each destination field is described by a ``FieldRule``: the legacy source
columns tried in order, the coercion applied to the first non-blank one, and
the default used when nothing usable is found.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from app.config import LegacyImportSettings, get_legacy_import_settings
from app.domain.legacy_import import (
    GatewayDraft,
    MeterDraft,
    OrganizationDraft,
    ReadingDraft,
    UserDraft,
)
from app.mappers.coercion import (
    clean_text,
    is_blank,
    is_config_file_reference,
    is_sentinel_datetime,
    parse_bool,
    parse_datetime,
    parse_multiplier,
    parse_optional_float,
)
from db.models.meter import DEFAULT_METER_ROLE, MeterStatus

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")

UNKNOWN = "Unknown"


class RowNormalizationError(ValueError):
    """Raised when a row carries a value that is present but unusable."""


@dataclass(frozen=True)
class FieldRule:
    target: str
    sources: tuple[str, ...]
    coerce: Callable[[Any], Any] = clean_text
    default: Any = None


def parse_meter_status(value: Any) -> str:
    text = clean_text(value)
    if text is not None and text.upper() == "INACTIVE":
        return MeterStatus.INACTIVE
    return MeterStatus.ACTIVE


def apply_rules(row: Mapping[str, Any], rules: tuple[FieldRule, ...]) -> dict[str, Any]:
    """
    Evaluate every rule against one projected row.
    """

    values: dict[str, Any] = {}
    for rule in rules:
        raw = _first_raw(row, rule.sources)
        value = rule.coerce(raw) if raw is not None else None
        values[rule.target] = rule.default if value is None else value
    return values


def _first_raw(row: Mapping[str, Any], sources: tuple[str, ...]) -> Any:
    for source in sources:
        value = row.get(source)
        if not is_blank(value):
            return value
    return None


# ── Mapping tables ────────────────────────────────────────────────────────────

ORGANIZATION_RULES: tuple[FieldRule, ...] = (
    FieldRule("code", ("site_code", "site_name")),
    FieldRule("name", ("site_name", "site_code")),
    FieldRule("last_log_update", ("date_modified",), parse_datetime),
)

USER_RULES: tuple[FieldRule, ...] = (
    FieldRule("username", ("user_name",)),
    FieldRule("name", ("user_real_name", "user_name")),
)

GATEWAY_RULES: tuple[FieldRule, ...] = (
    FieldRule("serial_number", ("rtu_sn_number",)),
    FieldRule("mac_address", ("mac_addr",)),
    FieldRule("ip_address", ("phone_no_or_ip_address",)),
    FieldRule("site_code", ("rtu_site_name",)),
    FieldRule("software_version", ("soft_rev",)),
    FieldRule("last_log_update", ("last_log_update",), parse_datetime),
)

METER_KEY_RULES: tuple[FieldRule, ...] = (
    FieldRule("name", ("meter_name",)),
    FieldRule("site_code", ("meter_site_name", "company_no")),
    FieldRule("gateway_serial", ("rtu_sn_number",)),
    FieldRule("configuration_file", ("meter_config_file", "meter_model")),
)

METER_ATTRIBUTE_RULES: tuple[FieldRule, ...] = (
    FieldRule("is_addressable", ("meter_name_addressable",), parse_bool, True),
    FieldRule("has_load_profile", ("meter_load_profile",), parse_bool, False),
    FieldRule("type", ("meter_type",)),
    FieldRule("default_name", ("meter_default_name",)),
    FieldRule("role", ("meter_role",), clean_text, DEFAULT_METER_ROLE),
    FieldRule("customer_name", ("customer_name",)),
    FieldRule("multiplier", ("meter_multiplier",), parse_multiplier, 1.0),
    FieldRule("status", ("meter_status",), parse_meter_status, MeterStatus.ACTIVE),
    FieldRule("last_log_update", ("last_log_update",), parse_datetime),
    FieldRule("software_version", ("soft_rev",)),
)

READING_TIMESTAMP_SOURCES: tuple[str, ...] = ("datetime", "reading_datetime")

READING_KEY_RULES: tuple[FieldRule, ...] = (
    FieldRule("meter_name", ("meter_id", "meter_name"), clean_text, UNKNOWN),
    FieldRule("location", ("location",), clean_text, UNKNOWN),
)


def _float_rule(target: str, source: str | None = None) -> FieldRule:
    return FieldRule(target, (source or target,), parse_optional_float)


def _datetime_rule(target: str, source: str) -> FieldRule:
    return FieldRule(target, (source,), parse_datetime)


READING_MEASUREMENT_RULES: tuple[FieldRule, ...] = (
    _float_rule("vrms_a"),
    _float_rule("vrms_b"),
    _float_rule("vrms_c"),
    _float_rule("irms_a"),
    _float_rule("irms_b"),
    _float_rule("irms_c"),
    _float_rule("frequency", "freq"),
    _float_rule("power_factor", "pf"),
    _float_rule("watt"),
    _float_rule("va"),
    _float_rule("var"),
    _float_rule("wh_delivered", "wh_del"),
    _float_rule("wh_received", "wh_rec"),
    _float_rule("wh_net"),
    _float_rule("wh_total"),
    _float_rule("varh_negative", "varh_neg"),
    _float_rule("varh_positive", "varh_pos"),
    _float_rule("varh_net"),
    _float_rule("varh_total"),
    _float_rule("vah_total"),
    _float_rule("max_rec_kw_demand", "max_rec_kw_dmd"),
    _datetime_rule("max_rec_kw_demand_time", "max_rec_kw_dmd_time"),
    _float_rule("max_del_kw_demand", "max_del_kw_dmd"),
    _datetime_rule("max_del_kw_demand_time", "max_del_kw_dmd_time"),
    _float_rule("max_pos_kvar_demand", "max_pos_kvar_dmd"),
    _datetime_rule("max_pos_kvar_demand_time", "max_pos_kvar_dmd_time"),
    _float_rule("max_neg_kvar_demand", "max_neg_kvar_dmd"),
    _datetime_rule("max_neg_kvar_demand_time", "max_neg_kvar_dmd_time"),
    _float_rule("v_phase_angle_a", "v_ph_angle_a"),
    _float_rule("v_phase_angle_b", "v_ph_angle_b"),
    _float_rule("v_phase_angle_c", "v_ph_angle_c"),
    _float_rule("i_phase_angle_a", "i_ph_angle_a"),
    _float_rule("i_phase_angle_b", "i_ph_angle_b"),
    _float_rule("i_phase_angle_c", "i_ph_angle_c"),
    FieldRule("mac_address", ("mac_addr",)),
    FieldRule("software_version", ("soft_rev",)),
    FieldRule("relay_status", ("relay_status",), parse_bool),
    FieldRule("genset_status", ("genset_status",), parse_bool),
)


class LegacyFieldMapper:
    """
    Normalizes projected legacy rows into drafts.

    ``normalize_*`` return ``None`` when the row has no usable natural key.
    """

    def __init__(self, settings: LegacyImportSettings | None = None) -> None:
        self._settings = settings or get_legacy_import_settings()

    def normalize_organization(self, row: Mapping[str, Any]) -> OrganizationDraft | None:
        values = apply_rules(row, ORGANIZATION_RULES)
        if values["code"] is None:
            return None
        return OrganizationDraft(
            code=values["code"],
            name=values["name"] or values["code"],
            last_log_update=values["last_log_update"],
        )

    def normalize_user(self, row: Mapping[str, Any]) -> UserDraft | None:
        values = apply_rules(row, USER_RULES)
        username = values["username"]
        if username is None:
            return None
        return UserDraft(
            email=self.derive_email(username),
            name=values["name"] or username,
            username=username,
        )

    def derive_email(self, username: str) -> str:
        if _EMAIL_PATTERN.match(username):
            return username
        return f"{username}@{self._settings.email_domain}"

    def normalize_gateway(self, row: Mapping[str, Any]) -> GatewayDraft | None:
        values = apply_rules(row, GATEWAY_RULES)
        if not (values["serial_number"] and values["mac_address"] and values["ip_address"]):
            return None
        return GatewayDraft(**values)

    def normalize_meter(self, row: Mapping[str, Any]) -> MeterDraft | None:
        keys = apply_rules(row, METER_KEY_RULES)
        if keys["name"] is None:
            return None

        configuration_file = keys["configuration_file"]
        if not is_config_file_reference(configuration_file, self._settings.config_file_extensions):
            configuration_file = None

        attributes = apply_rules(row, METER_ATTRIBUTE_RULES)
        attributes["brand"] = None
        return MeterDraft(
            name=keys["name"],
            site_code=keys["site_code"],
            gateway_serial=keys["gateway_serial"],
            configuration_file=configuration_file,
            attributes=attributes,
        )

    def normalize_reading(self, row: Mapping[str, Any]) -> ReadingDraft | None:
        """
        Build a reading draft.

        Missing or sentinel timestamps return ``None``; a timestamp that is
        present but unparseable raises ``RowNormalizationError``.
        """
        raw_timestamp = _first_raw(row, READING_TIMESTAMP_SOURCES)
        if raw_timestamp is None or is_sentinel_datetime(raw_timestamp):
            return None

        reading_at = parse_datetime(raw_timestamp)
        if reading_at is None:
            raise RowNormalizationError(f"Unparseable reading timestamp: {raw_timestamp!r}")

        keys = apply_rules(row, READING_KEY_RULES)
        return ReadingDraft(
            meter_name=keys["meter_name"],
            location=keys["location"],
            reading_at=reading_at,
            measurements=apply_rules(row, READING_MEASUREMENT_RULES),
        )
