"""
Repository layer exports.
"""

from db.repositories.errors import ImportJobError, ImportJobNotFoundError, ImportJobStateError
from db.repositories.gateway_repository import GatewayRepository
from db.repositories.import_job_repository import ImportJobRepository
from db.repositories.meter_reading_repository import MeterReadingRepository
from db.repositories.meter_repository import MeterRepository
from db.repositories.organization_repository import OrganizationRepository
from db.repositories.user_repository import UserRepository

__all__ = [
    "ImportJobRepository",
    "OrganizationRepository",
    "UserRepository",
    "GatewayRepository",
    "MeterRepository",
    "MeterReadingRepository",
    "ImportJobError",
    "ImportJobNotFoundError",
    "ImportJobStateError",
]
