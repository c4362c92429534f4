"""
db/models/gateway.py

Gateway (RTU) model: the data concentrator meters report through.
Migrated from the legacy ``meter_rtu`` table.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.meter import Meter
    from db.models.organization import Organization


class GatewayConnectionType:
    LAN = "LAN"


class Gateway(Base, TimestampMixin):
    __tablename__ = "gateways"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )

    serial_number: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Natural key: legacy rtu_sn_number",
    )

    site_code: Mapped[str | None] = mapped_column(String(100), nullable=True)

    mac_address: Mapped[str] = mapped_column(String(64), nullable=False)

    ip_address: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Network address; legacy rows may hold a phone number instead",
    )

    connection_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=GatewayConnectionType.LAN,
    )

    software_version: Mapped[str | None] = mapped_column(String(64), nullable=True)

    last_log_update: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="gateways",
    )

    meters: Mapped[list["Meter"]] = relationship(
        "Meter",
        back_populates="gateway",
    )

    __table_args__ = (Index("ix_gateways_organization_id", "organization_id"),)

    def __repr__(self) -> str:
        return f"<Gateway id={self.id} serial_number={self.serial_number!r}>"
