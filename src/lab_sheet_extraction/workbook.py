"""Dataclasses representing a parsed, read-only spreadsheet workbook."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from types import MappingProxyType
from typing import Any

from openpyxl.utils import get_column_letter

from lab_sheet_extraction.utils.exceptions import SheetNotFoundError


class CellKind(str, Enum):
    """Kinds of cell content found in lab spreadsheets."""

    NUMBER = "number"
    TEXT = "text"
    FORMULA = "formula"
    RICH_TEXT = "rich_text"
    BOOLEAN = "boolean"
    DATE = "date"
    EMPTY = "empty"


@dataclass(frozen=True)
class SheetCell:
    """A single worksheet cell.

    ``value`` holds the number or text for NUMBER/TEXT/RICH_TEXT cells and
    the cached result (possibly None) for FORMULA cells; ``formula`` holds
    the formula text of FORMULA cells.
    """

    kind: CellKind
    value: Any = None
    formula: str | None = None

    @classmethod
    def number(cls, value: float) -> SheetCell:
        return cls(CellKind.NUMBER, float(value))

    @classmethod
    def text(cls, value: str) -> SheetCell:
        return cls(CellKind.TEXT, value)

    @classmethod
    def formula_cell(cls, result: Any, text: str) -> SheetCell:
        return cls(CellKind.FORMULA, result, formula=text)

    @classmethod
    def rich_text(cls, value: str) -> SheetCell:
        return cls(CellKind.RICH_TEXT, value)

    @classmethod
    def empty(cls) -> SheetCell:
        return _EMPTY

    @classmethod
    def from_value(cls, value: Any) -> SheetCell:
        """Build a cell from a plain Python value.

        Strings starting with ``=`` are kept as text; formulas must be built
        with :meth:`formula_cell` since their cached result is unknown here.
        """
        if value is None or value == "":
            return _EMPTY
        if isinstance(value, SheetCell):
            return value
        if isinstance(value, bool):
            return cls(CellKind.BOOLEAN, value)
        if isinstance(value, (int, float)):
            return cls.number(value)
        if isinstance(value, (datetime, date, time)):
            return cls(CellKind.DATE, value)
        return cls.text(str(value))

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY


_EMPTY = SheetCell(CellKind.EMPTY)


def cell_address(row: int, column: int) -> str:
    """Return the A1-style address of a 1-indexed (row, column) pair."""
    return f"{get_column_letter(column)}{row}"


@dataclass(frozen=True)
class Worksheet:
    """A named, sparse grid of cells addressed by 1-indexed (row, column).

    Only non-empty cells are stored; every other address reads as an
    empty cell.
    """

    name: str
    cells: Mapping[tuple[int, int], SheetCell] = field(default_factory=dict)

    def __post_init__(self) -> None:
        populated = {
            address: cell
            for address, cell in sorted(self.cells.items())
            if not cell.is_empty
        }
        object.__setattr__(self, "cells", MappingProxyType(populated))

    @classmethod
    def from_rows(cls, name: str, rows: Sequence[Sequence[Any]]) -> Worksheet:
        """Build a worksheet from row lists of plain values, starting at A1."""
        cells: dict[tuple[int, int], SheetCell] = {}
        for row_idx, row in enumerate(rows, start=1):
            for col_idx, value in enumerate(row, start=1):
                cell = SheetCell.from_value(value)
                if not cell.is_empty:
                    cells[(row_idx, col_idx)] = cell
        return cls(name=name, cells=cells)

    @property
    def row_count(self) -> int:
        """Index of the last populated row, 0 for an empty sheet."""
        return max((row for row, _ in self.cells), default=0)

    @property
    def column_count(self) -> int:
        """Index of the last populated column, 0 for an empty sheet."""
        return max((col for _, col in self.cells), default=0)

    def cell(self, row: int, column: int) -> SheetCell:
        return self.cells.get((row, column), _EMPTY)

    def iter_rows(self) -> Iterator[tuple[int, list[tuple[int, SheetCell]]]]:
        """Yield ``(row, [(column, cell), ...])`` for non-empty rows in order."""
        current_row: int | None = None
        row_cells: list[tuple[int, SheetCell]] = []
        for (row, column), cell in self.cells.items():
            if row != current_row:
                if current_row is not None:
                    yield current_row, row_cells
                current_row = row
                row_cells = []
            row_cells.append((column, cell))
        if current_row is not None:
            yield current_row, row_cells

    def iter_cells(self) -> Iterator[tuple[int, int, SheetCell]]:
        """Yield ``(row, column, cell)`` for non-empty cells in row-major order."""
        for (row, column), cell in self.cells.items():
            yield row, column, cell


@dataclass(frozen=True)
class Workbook:
    """An ordered collection of worksheets loaded from one spreadsheet file."""

    sheets: tuple[Worksheet, ...]
    file_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "sheets", tuple(self.sheets))

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def get_sheet(self, name: str) -> Worksheet:
        """Return the worksheet called ``name``.

        Raises:
            SheetNotFoundError: If no worksheet has that name.
        """
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        raise SheetNotFoundError(
            name, available=self.sheet_names, file_path=self.file_name
        )
