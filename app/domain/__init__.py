"""
app/domain package marker.
"""

from app.domain.legacy_import import (
    GatewayDraft,
    ImportResult,
    MeterDraft,
    OrganizationDraft,
    ReadingDraft,
    UserDraft,
)

__all__ = [
    "GatewayDraft",
    "ImportResult",
    "MeterDraft",
    "OrganizationDraft",
    "ReadingDraft",
    "UserDraft",
]
