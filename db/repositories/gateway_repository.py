"""
Gateway lookups and upsert by serial number.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.gateway import Gateway


class GatewayRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_serial(self, serial_number: str) -> Gateway | None:
        stmt = select(Gateway).where(Gateway.serial_number == serial_number)
        return self._session.scalars(stmt).first()

    def first(self) -> Gateway | None:
        stmt = select(Gateway).order_by(Gateway.id.asc()).limit(1)
        return self._session.scalars(stmt).first()

    def upsert(self, *, serial_number: str, values: dict[str, Any]) -> tuple[Gateway, bool]:
        gateway = self.get_by_serial(serial_number)
        created = gateway is None
        if gateway is None:
            gateway = Gateway(serial_number=serial_number)
            self._session.add(gateway)

        for field, value in values.items():
            setattr(gateway, field, value)

        self._session.flush()
        return gateway, created
