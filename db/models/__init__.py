"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.configuration_file import ConfigurationFile
from db.models.gateway import Gateway, GatewayConnectionType
from db.models.import_job import ImportJob, ImportJobKind, ImportJobStatus
from db.models.meter import DEFAULT_METER_ROLE, Meter, MeterStatus
from db.models.meter_reading import MeterReading
from db.models.organization import Organization
from db.models.user import User

__all__ = [
    "Organization",
    "User",
    "Gateway",
    "GatewayConnectionType",
    "ConfigurationFile",
    "Meter",
    "MeterStatus",
    "DEFAULT_METER_ROLE",
    "MeterReading",
    "ImportJob",
    "ImportJobKind",
    "ImportJobStatus",
]
