"""
Five-phase import of a parsed legacy dump into the normalized schema.

Phases run in dependency order (organizations, users, gateways, meters,
readings) inside the caller's transaction; this service never commits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from sqlalchemy.orm import Session

from app.config import LegacyImportSettings, get_legacy_import_settings
from app.domain.legacy_import import ImportResult, MeterDraft
from app.logging_utils import log_import_event
from app.mappers.legacy_field_mapper import LegacyFieldMapper, RowNormalizationError
from app.services.import_progress import (
    ImportCancelledError,
    ImportProgressReporter,
    NullProgressReporter,
)
from app.services.passwords import hash_password
from db.models.gateway import Gateway, GatewayConnectionType
from db.models.organization import Organization
from db.repositories.gateway_repository import GatewayRepository
from db.repositories.meter_reading_repository import MeterReadingRepository
from db.repositories.meter_repository import MeterRepository
from db.repositories.organization_repository import OrganizationRepository
from db.repositories.user_repository import UserRepository
from legacy_dump.parser import DumpStore

logger = logging.getLogger(__name__)


@dataclass
class _RunState:
    """
    Mutable counters for one ``import_store`` call.
    """

    store: DumpStore
    reporter: ImportProgressReporter
    total: int
    processed: int = 0
    result: ImportResult = field(default_factory=ImportResult)

    def report(self) -> None:
        self.reporter.report(self.processed, self.total, self.result.errors)

    def check_cancelled(self, checkpoint: str) -> None:
        if self.reporter.is_cancelled():
            logger.info("Import cancellation observed at checkpoint=%s", checkpoint)
            raise ImportCancelledError(f"Import cancelled at {checkpoint}")


class SqlDumpImportService:
    """
    Maps a ``DumpStore`` into organizations, users, gateways, meters and readings.
    """

    def __init__(
        self,
        *,
        settings: LegacyImportSettings | None = None,
        mapper: LegacyFieldMapper | None = None,
    ) -> None:
        self._settings = settings or get_legacy_import_settings()
        self._mapper = mapper or LegacyFieldMapper(self._settings)

    def count_source_rows(self, store: DumpStore) -> int:
        return sum(store.row_count(table) for table in self._settings.source_tables)

    def import_store(
        self,
        store: DumpStore,
        *,
        db: Session,
        reporter: ImportProgressReporter | None = None,
    ) -> ImportResult:
        """
        Run all five phases against ``db``.

        Raises ``ImportCancelledError`` when the reporter signals cancellation;
        any exception leaves rollback to the caller.
        """

        state = _RunState(
            store=store,
            reporter=reporter or NullProgressReporter(),
            total=self.count_source_rows(store),
        )

        phases = (
            ("organizations", self._settings.organizations_table, self._import_organizations),
            ("users", self._settings.users_table, self._import_users),
            ("gateways", self._settings.gateways_table, self._import_gateways),
            ("meters", self._settings.meters_table, self._import_meters),
        )
        for entity, table, phase in phases:
            state.check_cancelled(entity)
            if store.row_count(table) == 0:
                logger.warning("No rows found for legacy table=%s", table)
            phase(db, state)
            state.processed += store.row_count(table)
            state.report()
            log_import_event(
                logger,
                "phase_completed",
                entity=entity,
                imported=state.result.counts[entity],
                skipped=state.result.skipped[entity],
            )

        state.check_cancelled("readings")
        self._import_readings(db, state)
        log_import_event(
            logger,
            "phase_completed",
            entity="readings",
            imported=state.result.counts["readings"],
            skipped=state.result.skipped["readings"],
            errors=state.result.errors,
        )
        return state.result

    # ── Phase 1 ───────────────────────────────────────────────────────────────

    def _import_organizations(self, db: Session, state: _RunState) -> None:
        repository = OrganizationRepository(db)
        for row in state.store.iter_rows(self._settings.organizations_table):
            draft = self._mapper.normalize_organization(row)
            if draft is None:
                state.result.skipped["organizations"] += 1
                logger.debug("Skipping organization row without site code")
                continue
            repository.find_or_create(
                code=draft.code,
                name=draft.name,
                last_log_update=draft.last_log_update,
            )
            state.result.counts["organizations"] += 1

    # ── Phase 2 ───────────────────────────────────────────────────────────────

    def _import_users(self, db: Session, state: _RunState) -> None:
        repository = UserRepository(db)
        password_hash: str | None = None
        for row in state.store.iter_rows(self._settings.users_table):
            draft = self._mapper.normalize_user(row)
            if draft is None:
                state.result.skipped["users"] += 1
                logger.debug("Skipping user row without user name")
                continue
            if password_hash is None:
                password_hash = hash_password(self._settings.placeholder_password)
            repository.find_or_create(
                email=draft.email,
                name=draft.name,
                username=draft.username,
                password_hash=password_hash,
            )
            state.result.counts["users"] += 1

    # ── Phase 3 ───────────────────────────────────────────────────────────────

    def _import_gateways(self, db: Session, state: _RunState) -> None:
        organizations = OrganizationRepository(db)
        gateways = GatewayRepository(db)
        for row in state.store.iter_rows(self._settings.gateways_table):
            draft = self._mapper.normalize_gateway(row)
            if draft is None:
                state.result.skipped["gateways"] += 1
                logger.debug("Skipping gateway row missing serial, MAC or network address")
                continue

            organization = self._resolve_gateway_organization(organizations, draft.site_code)
            if organization is None:
                state.result.skipped["gateways"] += 1
                logger.info(
                    "Skipping gateway serial=%s: no organization for site code=%s",
                    draft.serial_number,
                    draft.site_code,
                )
                continue

            gateways.upsert(
                serial_number=draft.serial_number,
                values={
                    "organization_id": organization.id,
                    "site_code": organization.code,
                    "mac_address": draft.mac_address,
                    "ip_address": draft.ip_address,
                    "connection_type": GatewayConnectionType.LAN,
                    "software_version": draft.software_version,
                    "last_log_update": draft.last_log_update,
                },
            )
            state.result.counts["gateways"] += 1

    @staticmethod
    def _resolve_gateway_organization(
        repository: OrganizationRepository,
        site_code: str | None,
    ) -> Organization | None:
        if site_code:
            return repository.get_by_code(site_code)
        return repository.first()

    # ── Phase 4 ───────────────────────────────────────────────────────────────

    def _import_meters(self, db: Session, state: _RunState) -> None:
        organizations = OrganizationRepository(db)
        gateways = GatewayRepository(db)
        meters = MeterRepository(db)
        for row in state.store.iter_rows(self._settings.meters_table):
            draft = self._mapper.normalize_meter(row)
            if draft is None:
                state.result.skipped["meters"] += 1
                logger.debug("Skipping meter row without meter name")
                continue

            organization = self._resolve_meter_organization(organizations, draft)
            gateway = self._resolve_meter_gateway(gateways, draft)
            if gateway is None:
                state.result.skipped["meters"] += 1
                logger.info(
                    "Skipping meter name=%s: gateway serial=%s not found",
                    draft.name,
                    draft.gateway_serial,
                )
                continue

            values: dict[str, Any] = dict(draft.attributes)
            values["site_code"] = organization.code
            values["configuration_file_id"] = None
            if draft.configuration_file:
                configuration_file, _ = meters.find_or_create_configuration_file(draft.configuration_file)
                values["configuration_file_id"] = configuration_file.id

            meters.upsert(
                name=draft.name,
                organization_id=organization.id,
                gateway_id=gateway.id,
                values=values,
            )
            state.result.counts["meters"] += 1

    def _resolve_meter_organization(
        self,
        repository: OrganizationRepository,
        draft: MeterDraft,
    ) -> Organization:
        code = draft.site_code or self._settings.default_organization_code
        name = draft.site_code or self._settings.default_organization_name
        organization, created = repository.find_or_create(code=code, name=name)
        if created:
            logger.info("Created organization code=%s while importing meter name=%s", code, draft.name)
        return organization

    @staticmethod
    def _resolve_meter_gateway(repository: GatewayRepository, draft: MeterDraft) -> Gateway | None:
        if draft.gateway_serial:
            return repository.get_by_serial(draft.gateway_serial)
        return repository.first()

    # ── Phase 5 ───────────────────────────────────────────────────────────────

    def _import_readings(self, db: Session, state: _RunState) -> None:
        table = self._settings.readings_table
        if state.store.row_count(table) == 0:
            logger.info("No telemetry rows in legacy table=%s", table)
            state.report()
            return

        readings = MeterReadingRepository(db)
        meter_ids = MeterRepository(db).ids_by_name()
        interval = self._settings.progress_interval
        pending: list[dict[str, Any]] = []

        for index, row in enumerate(state.store.iter_rows(table), start=1):
            self._stage_reading(row, meter_ids, pending, state)
            state.processed += 1

            if len(pending) >= self._settings.reading_batch_size:
                readings.bulk_insert(pending, batch_size=self._settings.reading_batch_size)
                pending.clear()

            if index % interval == 0:
                state.report()
                state.check_cancelled(f"readings row {index}")

        if pending:
            readings.bulk_insert(pending, batch_size=self._settings.reading_batch_size)
        state.report()

    def _stage_reading(
        self,
        row: dict[str, Any],
        meter_ids: dict[str, int],
        pending: list[dict[str, Any]],
        state: _RunState,
    ) -> None:
        try:
            draft = self._mapper.normalize_reading(row)
        except RowNormalizationError as exc:
            state.result.errors += 1
            logger.debug("Rejected reading row: %s", exc)
            return

        if draft is None:
            state.result.skipped["readings"] += 1
            return

        meter_id = meter_ids.get(draft.meter_name)
        if meter_id is None and self._settings.require_known_meter:
            state.result.skipped["readings"] += 1
            logger.debug("Skipping reading for unknown meter name=%s", draft.meter_name)
            return

        pending.append(
            {
                "meter_id": meter_id,
                "meter_name": draft.meter_name,
                "location": draft.location,
                "reading_at": draft.reading_at,
                **draft.measurements,
            }
        )
        state.result.counts["readings"] += 1


@lru_cache(maxsize=1)
def get_sql_dump_import_service() -> SqlDumpImportService:
    return SqlDumpImportService()
