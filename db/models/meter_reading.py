"""
db/models/meter_reading.py

Telemetry reading migrated from the legacy ``meter_data`` table.

Readings are append-only: the import inserts every usable row and never
deduplicates. ``meter_id`` is linked when the legacy meter name resolves to
an imported meter; ``meter_name`` always keeps the legacy value.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, BigIntegerKey, TimestampMixin


class MeterReading(Base, TimestampMixin):
    __tablename__ = "meter_readings"

    id: Mapped[int] = mapped_column(BigIntegerKey, primary_key=True, autoincrement=True)

    meter_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("meters.id", ondelete="SET NULL"),
        nullable=True,
    )
    meter_name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    reading_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Voltage / current per phase
    vrms_a: Mapped[float | None] = mapped_column(Float, nullable=True)
    vrms_b: Mapped[float | None] = mapped_column(Float, nullable=True)
    vrms_c: Mapped[float | None] = mapped_column(Float, nullable=True)
    irms_a: Mapped[float | None] = mapped_column(Float, nullable=True)
    irms_b: Mapped[float | None] = mapped_column(Float, nullable=True)
    irms_c: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Power
    frequency: Mapped[float | None] = mapped_column(Float, nullable=True)
    power_factor: Mapped[float | None] = mapped_column(Float, nullable=True)
    watt: Mapped[float | None] = mapped_column(Float, nullable=True)
    va: Mapped[float | None] = mapped_column(Float, nullable=True)
    var: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Energy counters
    wh_delivered: Mapped[float | None] = mapped_column(Float, nullable=True)
    wh_received: Mapped[float | None] = mapped_column(Float, nullable=True)
    wh_net: Mapped[float | None] = mapped_column(Float, nullable=True)
    wh_total: Mapped[float | None] = mapped_column(Float, nullable=True)
    varh_negative: Mapped[float | None] = mapped_column(Float, nullable=True)
    varh_positive: Mapped[float | None] = mapped_column(Float, nullable=True)
    varh_net: Mapped[float | None] = mapped_column(Float, nullable=True)
    varh_total: Mapped[float | None] = mapped_column(Float, nullable=True)
    vah_total: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Demand peaks
    max_rec_kw_demand: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_rec_kw_demand_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_del_kw_demand: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_del_kw_demand_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_pos_kvar_demand: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_pos_kvar_demand_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_neg_kvar_demand: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_neg_kvar_demand_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Phase angles
    v_phase_angle_a: Mapped[float | None] = mapped_column(Float, nullable=True)
    v_phase_angle_b: Mapped[float | None] = mapped_column(Float, nullable=True)
    v_phase_angle_c: Mapped[float | None] = mapped_column(Float, nullable=True)
    i_phase_angle_a: Mapped[float | None] = mapped_column(Float, nullable=True)
    i_phase_angle_b: Mapped[float | None] = mapped_column(Float, nullable=True)
    i_phase_angle_c: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Device metadata
    mac_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    software_version: Mapped[str | None] = mapped_column(String(64), nullable=True)
    relay_status: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    genset_status: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    __table_args__ = (
        Index("ix_meter_readings_meter_name_reading_at", "meter_name", "reading_at"),
        Index("ix_meter_readings_meter_id", "meter_id"),
    )

    def __repr__(self) -> str:
        return f"<MeterReading id={self.id} meter_name={self.meter_name!r} reading_at={self.reading_at}>"
