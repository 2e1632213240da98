"""Read a worksheet as a header row followed by data rows."""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from lab_sheet_extraction.services.cell_normalizer import (
    DisplayValue,
    normalize_cell,
)
from lab_sheet_extraction.workbook import Worksheet


@dataclass
class TableStructure:
    """Headers and rows of a CSV-like worksheet."""

    headers: list[str]
    data: list[dict[str, DisplayValue | None]] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Render the table as a pandas DataFrame with the parsed headers."""
        return pd.DataFrame(self.data, columns=self.headers)


def _header_text(value: DisplayValue | None) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_table_structure(worksheet: Worksheet) -> TableStructure:
    """Parse ``worksheet`` treating its first non-empty row as headers.

    Header cells are taken in order, skipping gaps, as in a CSV export.
    Each later row maps header -> normalized value for columns up to the
    number of headers; cells missing from a row read as None.
    """
    rows = worksheet.iter_rows()
    first = next(rows, None)
    if first is None:
        return TableStructure(headers=[])

    _, header_cells = first
    headers = [_header_text(normalize_cell(cell)) for _, cell in header_cells]

    data: list[dict[str, DisplayValue | None]] = []
    for row, _ in rows:
        data.append(
            {
                header: normalize_cell(worksheet.cell(row, column))
                for column, header in enumerate(headers, start=1)
            }
        )

    return TableStructure(headers=headers, data=data)
