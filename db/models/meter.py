"""
db/models/meter.py

Meter model, migrated from the legacy ``meter_details`` table.
A meter cannot exist without the gateway it reports through.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.configuration_file import ConfigurationFile
    from db.models.gateway import Gateway
    from db.models.organization import Organization


class MeterStatus:
    ACTIVE = "Active"
    INACTIVE = "Inactive"


DEFAULT_METER_ROLE = "Client Meter"


class Meter(Base, TimestampMixin):
    """
    Upserted by its natural key (name, organization, gateway).
    """

    __tablename__ = "meters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )

    gateway_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("gateways.id", ondelete="CASCADE"),
        nullable=False,
    )

    configuration_file_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("configuration_files.id", ondelete="SET NULL"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    site_code: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_addressable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    has_load_profile: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    default_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    brand: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Manufacturer; never populated from legacy config filenames",
    )

    role: Mapped[str] = mapped_column(String(100), nullable=False, default=DEFAULT_METER_ROLE)
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    multiplier: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=MeterStatus.ACTIVE)

    last_log_update: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    software_version: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # ── Relationships ──────────────────────────────────────────────────────────

    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="meters",
    )

    gateway: Mapped["Gateway"] = relationship(
        "Gateway",
        back_populates="meters",
    )

    configuration_file: Mapped["ConfigurationFile | None"] = relationship(
        "ConfigurationFile",
        back_populates="meters",
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        UniqueConstraint(
            "name",
            "organization_id",
            "gateway_id",
            name="uq_meters_name_organization_gateway",
        ),
        Index("ix_meters_name", "name"),
        Index("ix_meters_gateway_id", "gateway_id"),
    )

    def __repr__(self) -> str:
        return f"<Meter id={self.id} name={self.name!r} gateway_id={self.gateway_id}>"
