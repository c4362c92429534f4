"""
Meter and configuration file persistence for the legacy import.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.configuration_file import ConfigurationFile
from db.models.meter import Meter


class MeterRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_natural_key(
        self,
        *,
        name: str,
        organization_id: int,
        gateway_id: int,
    ) -> Meter | None:
        stmt = select(Meter).where(
            Meter.name == name,
            Meter.organization_id == organization_id,
            Meter.gateway_id == gateway_id,
        )
        return self._session.scalars(stmt).first()

    def upsert(
        self,
        *,
        name: str,
        organization_id: int,
        gateway_id: int,
        values: dict[str, Any],
    ) -> tuple[Meter, bool]:
        meter = self.get_by_natural_key(
            name=name,
            organization_id=organization_id,
            gateway_id=gateway_id,
        )
        created = meter is None
        if meter is None:
            meter = Meter(name=name, organization_id=organization_id, gateway_id=gateway_id)
            self._session.add(meter)

        for field, value in values.items():
            setattr(meter, field, value)

        self._session.flush()
        return meter, created

    def ids_by_name(self) -> dict[str, int]:
        """
        Map meter names to ids; the lowest id wins for names shared across gateways.
        """
        stmt = select(Meter.name, Meter.id).order_by(Meter.id.desc())
        return {name: meter_id for name, meter_id in self._session.execute(stmt)}

    def find_or_create_configuration_file(self, meter_model: str) -> tuple[ConfigurationFile, bool]:
        stmt = select(ConfigurationFile).where(ConfigurationFile.meter_model == meter_model)
        configuration_file = self._session.scalars(stmt).first()
        if configuration_file is not None:
            return configuration_file, False

        configuration_file = ConfigurationFile(meter_model=meter_model, config_file_content="")
        self._session.add(configuration_file)
        self._session.flush()
        return configuration_file, True
