"""Find the value belonging to a label cell by looking at its neighbours.

Lab reports put a parameter's value immediately right of its label most of
the time, below it in column-oriented tables, and occasionally one step
further away. Neighbours are tried in that order and the first numeric cell
wins, carrying the confidence of the offset it was found at.
"""

from __future__ import annotations

from dataclasses import dataclass

from lab_sheet_extraction.services.cell_normalizer import cell_number
from lab_sheet_extraction.workbook import Worksheet, cell_address


@dataclass(frozen=True)
class SearchOffset:
    """A relative position to inspect and the confidence it carries."""

    row_offset: int
    column_offset: int
    confidence: int


@dataclass(frozen=True)
class ProximityMatch:
    """A numeric value found next to a label."""

    value: float
    address: str
    confidence: int


SEARCH_OFFSETS: tuple[SearchOffset, ...] = (
    SearchOffset(0, 1, 90),  # right
    SearchOffset(1, 0, 85),  # below
    SearchOffset(1, 1, 80),  # below-right
    SearchOffset(0, 2, 75),  # two right
    SearchOffset(2, 0, 70),  # two below
    SearchOffset(-1, 1, 65),  # above-right
    SearchOffset(1, -1, 60),  # below-left
)


def find_value_near(
    worksheet: Worksheet,
    row: int,
    column: int,
    offsets: tuple[SearchOffset, ...] = SEARCH_OFFSETS,
) -> ProximityMatch | None:
    """Return the first numeric neighbour of the cell at ``(row, column)``.

    Offsets landing outside the grid (row or column below 1) are skipped.
    """
    for offset in offsets:
        target_row = row + offset.row_offset
        target_col = column + offset.column_offset
        if target_row < 1 or target_col < 1:
            continue

        value = cell_number(worksheet.cell(target_row, target_col))
        if value is not None:
            return ProximityMatch(
                value=value,
                address=cell_address(target_row, target_col),
                confidence=offset.confidence,
            )

    return None
