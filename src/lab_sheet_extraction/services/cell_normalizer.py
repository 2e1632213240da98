"""Collapse heterogeneous worksheet cells into one display value."""

from __future__ import annotations

import re

from lab_sheet_extraction.workbook import CellKind, SheetCell

DisplayValue = float | str

_SYMBOLS_RE = re.compile(r"[%,\s$€£¥]")
_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")
_LEADING_FLOAT_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def normalize_cell(cell: SheetCell) -> DisplayValue | None:
    """Return the number or text a reader would see in ``cell``.

    Formula cells prefer their cached result over the formula text. Empty,
    boolean and date cells have no display value for extraction purposes.
    """
    match cell.kind:
        case CellKind.NUMBER:
            return float(cell.value)
        case CellKind.TEXT | CellKind.RICH_TEXT:
            return str(cell.value)
        case CellKind.FORMULA:
            return _formula_display(cell)
        case _:
            return None


def _formula_result(cell: SheetCell) -> DisplayValue | None:
    result = cell.value
    if isinstance(result, bool):
        return None
    if isinstance(result, (int, float)):
        return float(result)
    if isinstance(result, str) and result:
        return result
    return None


def _formula_display(cell: SheetCell) -> DisplayValue | None:
    result = _formula_result(cell)
    if result is not None:
        return result
    return cell.formula or None


def _extraction_value(cell: SheetCell) -> DisplayValue | None:
    # formula source text never feeds labels or values
    if cell.kind is CellKind.FORMULA:
        return _formula_result(cell)
    return normalize_cell(cell)


def parse_number(text: str) -> float | None:
    """Pull a number out of a lab-report value string.

    Currency, percent and thousands separators are dropped, then anything
    that is not a digit, ``.`` or ``-``. The longest leading float is
    parsed, so ``"5-10"`` reads as 5.
    """
    cleaned = _NON_NUMERIC_RE.sub("", _SYMBOLS_RE.sub("", text)).strip()
    if not cleaned:
        return None
    match = _LEADING_FLOAT_RE.match(cleaned)
    if match is None:
        return None
    return float(match.group())


def cell_number(cell: SheetCell) -> float | None:
    """Return the numeric value of ``cell``, parsing text when necessary.

    Formula cells count only through their cached result.
    """
    value = _extraction_value(cell)
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        return parse_number(value)
    return None


def cell_text(cell: SheetCell) -> str | None:
    """Return the lowercase, stripped text of ``cell`` or None for non-text."""
    value = _extraction_value(cell)
    if not isinstance(value, str):
        return None
    text = value.lower().strip()
    return text or None
