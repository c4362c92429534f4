"""
app/mappers package marker.
"""

from app.mappers.legacy_field_mapper import FieldRule, LegacyFieldMapper, RowNormalizationError

__all__ = [
    "FieldRule",
    "LegacyFieldMapper",
    "RowNormalizationError",
]
