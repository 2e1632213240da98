"""Load .xlsx workbooks from disk or memory into the read-only cell model."""

from __future__ import annotations

import io
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.cell import Cell
from openpyxl.cell.rich_text import CellRichText
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.formula import ArrayFormula
from openpyxl.worksheet.worksheet import Worksheet as OpenpyxlWorksheet

from lab_sheet_extraction.config import Settings
from lab_sheet_extraction.utils.exceptions import (
    WorkbookLoadError,
    WorkbookNotFoundError,
)
from lab_sheet_extraction.utils.logging import get_logger
from lab_sheet_extraction.workbook import SheetCell, Workbook, Worksheet

logger = get_logger(__name__)

# SyntaxError covers malformed XML from both ElementTree and lxml
_LOAD_ERRORS = (
    InvalidFileException,
    BadZipFile,
    KeyError,
    ValueError,
    OSError,
    SyntaxError,
)


@dataclass
class WorkbookLoadOptions:
    """Options controlling how a workbook is read."""

    include_formulas: bool = True
    max_rows: int | None = None
    max_columns: int | None = None

    @classmethod
    def from_settings(cls, s: Settings) -> WorkbookLoadOptions:
        return cls(
            include_formulas=s.include_formulas,
            max_rows=s.max_rows,
            max_columns=s.max_columns,
        )


class WorkbookLoader:
    """Read spreadsheets with openpyxl and convert them to :class:`Workbook`."""

    def __init__(self, options: WorkbookLoadOptions | None = None) -> None:
        self._options = options or WorkbookLoadOptions()

    def load_path(self, file_path: Path | str) -> Workbook:
        """Load a workbook file.

        Raises:
            WorkbookNotFoundError: If the file does not exist.
            WorkbookLoadError: If openpyxl cannot read the file.
        """
        path = Path(file_path)
        if not path.exists():
            raise WorkbookNotFoundError(str(path))
        with path.open("rb") as handle:
            data = handle.read()
        return self.load_bytes(data, file_name=path.name)

    def load_bytes(self, data: bytes, file_name: str | None = None) -> Workbook:
        """Load a workbook from its raw bytes.

        Raises:
            WorkbookLoadError: If openpyxl cannot read the data.
        """
        # Load twice: once to capture formulas, once for cached results
        formulas_wb = self._open(io.BytesIO(data), file_name, data_only=False)
        computed_wb = self._open(io.BytesIO(data), file_name, data_only=True)

        sheets = [
            self._convert_sheet(formulas_wb[name], computed_wb[name])
            for name in formulas_wb.sheetnames
        ]
        logger.debug(
            "Workbook loaded",
            file_name=file_name,
            sheets=len(sheets),
        )
        return Workbook(sheets=tuple(sheets), file_name=file_name)

    def get_sheet_names(self, file_path: Path | str) -> list[str]:
        """List all sheet names in a workbook without converting cells."""
        path = Path(file_path)
        if not path.exists():
            raise WorkbookNotFoundError(str(path))
        try:
            wb = load_workbook(filename=path, read_only=True)
        except _LOAD_ERRORS as exc:
            raise WorkbookLoadError(
                f"Failed to read workbook: {path.name}",
                file_path=str(path),
                reason=str(exc),
            ) from exc
        try:
            return list(wb.sheetnames)
        finally:
            wb.close()

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _open(source: BinaryIO, file_name: str | None, *, data_only: bool) -> Any:
        try:
            return load_workbook(source, data_only=data_only, rich_text=not data_only)
        except _LOAD_ERRORS as exc:
            raise WorkbookLoadError(
                f"Failed to parse workbook: {file_name or '<bytes>'}",
                file_path=file_name,
                reason=str(exc),
            ) from exc

    def _convert_sheet(
        self, sheet: OpenpyxlWorksheet, computed_sheet: OpenpyxlWorksheet
    ) -> Worksheet:
        """Convert one openpyxl worksheet, keeping only populated cells."""
        opts = self._options
        row_iter: Iterable[tuple[Cell, ...]] = sheet.iter_rows(
            max_row=opts.max_rows, max_col=opts.max_columns
        )
        computed_iter = computed_sheet.iter_rows(
            max_row=opts.max_rows, max_col=opts.max_columns, values_only=True
        )

        cells: dict[tuple[int, int], SheetCell] = {}
        for row_cells, computed_values in zip(row_iter, computed_iter, strict=True):
            for cell, computed_value in zip(row_cells, computed_values, strict=True):
                converted = self._build_cell(cell, computed_value)
                if not converted.is_empty:
                    cells[(cell.row, cell.column)] = converted

        return Worksheet(name=sheet.title, cells=cells)

    def _build_cell(self, cell: Cell, computed_value: Any) -> SheetCell:
        """Map an openpyxl cell onto the tagged cell model."""
        value = cell.value
        if value is None:
            return SheetCell.empty()

        if cell.data_type == "f":
            formula = value.text if isinstance(value, ArrayFormula) else str(value)
            if computed_value is None and not self._options.include_formulas:
                return SheetCell.empty()
            return SheetCell.formula_cell(computed_value, formula)

        if isinstance(value, CellRichText):
            return SheetCell.rich_text(str(value))

        if cell.data_type == "e":
            # error values such as #N/A or #DIV/0!
            return SheetCell.empty()

        return SheetCell.from_value(value)
