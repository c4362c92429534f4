"""
Row projection: zip a raw value list against its table's column list.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from legacy_dump.values import ScalarValue

logger = logging.getLogger(__name__)

ProjectedRow = dict[str, ScalarValue]


def project_row(columns: Sequence[str], values: Sequence[ScalarValue]) -> ProjectedRow:
    """
    Label a raw row by column name.

    Short rows are padded with None and extra trailing values are dropped;
    a partially-populated row is preferred over failing the table.
    """

    if len(values) != len(columns):
        logger.debug(
            "Structural mismatch while projecting row: columns=%d values=%d",
            len(columns),
            len(values),
        )

    row: ProjectedRow = dict.fromkeys(columns)
    for column, value in zip(columns, values):
        row[column] = value
    return row
