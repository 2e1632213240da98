"""Classify a worksheet as key-value, tabular, or mixed.

The classification is advisory metadata for audit logs; it never changes
how values are extracted.
"""

from __future__ import annotations

from dataclasses import dataclass

from lab_sheet_extraction.models import LayoutType
from lab_sheet_extraction.services.cell_normalizer import normalize_cell
from lab_sheet_extraction.workbook import Worksheet

DEFAULT_RATIO_THRESHOLD = 0.6


@dataclass(frozen=True)
class LayoutScores:
    """Row-level evidence gathered by :func:`score_layout`."""

    key_value_score: int
    table_score: int
    row_count: int

    @property
    def key_value_ratio(self) -> float:
        return self.key_value_score / max(self.row_count, 1)

    @property
    def table_ratio(self) -> float:
        return self.table_score / max(self.row_count, 1)


def score_layout(worksheet: Worksheet) -> LayoutScores:
    """Count key-value rows and table-like rows.

    A row of exactly two cells holding both text and a number is a key-value
    pair. A wide first row counts double, as it is probably a header.
    """
    key_value_score = 0
    table_score = 0

    for row, cells in worksheet.iter_rows():
        values = [normalize_cell(cell) for _, cell in cells]
        has_text = any(isinstance(v, str) for v in values)
        has_number = any(isinstance(v, float) for v in values)

        if len(cells) == 2 and has_text and has_number:
            key_value_score += 1
        elif len(cells) > 2 and row == 1:
            table_score += 2
        elif len(cells) > 2:
            table_score += 1

    return LayoutScores(
        key_value_score=key_value_score,
        table_score=table_score,
        row_count=worksheet.row_count,
    )


def classify_layout(
    worksheet: Worksheet, threshold: float = DEFAULT_RATIO_THRESHOLD
) -> LayoutType:
    """Return the layout type of ``worksheet``."""
    scores = score_layout(worksheet)
    if scores.key_value_ratio > threshold:
        return LayoutType.KEY_VALUE
    if scores.table_ratio > threshold:
        return LayoutType.TABLE
    return LayoutType.MIXED
