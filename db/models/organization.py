"""
db/models/organization.py

Organization model: one metering site, migrated from the legacy ``meter_site`` table.
Gateways and meters are owned by an organization.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.gateway import Gateway
    from db.models.meter import Meter


class Organization(Base, TimestampMixin):
    """
    Site/organization keyed by its legacy site code.

    Imports never update an existing organization, so manual edits made
    after a previous import survive re-runs.
    """

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    code: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Natural key: legacy site code",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    last_log_update: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    gateways: Mapped[list["Gateway"]] = relationship(
        "Gateway",
        back_populates="organization",
    )

    meters: Mapped[list["Meter"]] = relationship(
        "Meter",
        back_populates="organization",
    )

    def __repr__(self) -> str:
        return f"<Organization id={self.id} code={self.code!r}>"
