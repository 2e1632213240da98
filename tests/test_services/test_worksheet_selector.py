"""Tests for worksheet selection."""

import pytest

from lab_sheet_extraction.services.worksheet_selector import select_worksheet
from lab_sheet_extraction.utils.exceptions import ErrorCode, InvalidWorkbookError
from lab_sheet_extraction.workbook import Workbook, Worksheet


def _sheet(name: str, rows: list[list[object]] | None = None) -> Worksheet:
    return Worksheet.from_rows(name, rows or [])


class TestSelectWorksheet:
    """Tests for select_worksheet."""

    def test_matches_preferred_name_case_insensitively(self) -> None:
        wb = Workbook(sheets=(_sheet("Summary", [["x"]]), _sheet("SOIL Data")))
        assert select_worksheet(wb).name == "SOIL Data"

    def test_fragment_priority_beats_sheet_order(self) -> None:
        wb = Workbook(sheets=(_sheet("Raw Data"), _sheet("Lab Results")))
        assert select_worksheet(wb).name == "Lab Results"

    def test_first_sheet_with_rows_when_no_name_matches(self) -> None:
        wb = Workbook(sheets=(_sheet("Cover"), _sheet("Sheet2", [["pH", 6.1]])))
        assert select_worksheet(wb).name == "Sheet2"

    def test_first_sheet_when_all_empty(self) -> None:
        wb = Workbook(sheets=(_sheet("One"), _sheet("Two")))
        assert select_worksheet(wb).name == "One"

    def test_no_sheets_is_invalid(self) -> None:
        with pytest.raises(InvalidWorkbookError) as exc_info:
            select_worksheet(Workbook(sheets=()))
        assert exc_info.value.error_code == ErrorCode.INVALID_WORKBOOK
