"""
db/models/configuration_file.py

Meter configuration file reference.

Legacy meters stored a ``*.cfg`` filename in their model column; the import
turns each distinct filename into one of these records and links meters to it.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.meter import Meter


class ConfigurationFile(Base, TimestampMixin):
    __tablename__ = "configuration_files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    meter_model: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Configuration filename, e.g. ION6200.cfg",
    )

    config_file_content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Empty until the file body is uploaded",
    )

    meters: Mapped[list["Meter"]] = relationship(
        "Meter",
        back_populates="configuration_file",
    )

    def __repr__(self) -> str:
        return f"<ConfigurationFile id={self.id} meter_model={self.meter_model!r}>"
