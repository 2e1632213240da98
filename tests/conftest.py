from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch
from zipfile import ZipFile

import pytest
from openpyxl import Workbook as OpenpyxlWorkbook

from lab_sheet_extraction.config import Settings
from lab_sheet_extraction.utils.logging import clear_context
from lab_sheet_extraction.workbook import Workbook, Worksheet


@pytest.fixture
def default_settings() -> Settings:
    """Settings with defaults only, ignoring the environment and .env files."""
    with patch.dict(os.environ, {}, clear=True):
        return Settings(_env_file=None)


@pytest.fixture(autouse=True)
def _reset_log_context() -> Iterator[None]:
    clear_context()
    yield
    clear_context()


@pytest.fixture
def key_value_sheet() -> Worksheet:
    """A two-column report: label in column A, value in column B."""
    return Worksheet.from_rows(
        "Soil Analysis",
        [
            ["pH", 6.5],
            ["Nitrogen", 0.25],
            ["K", 120],
            ["Calcium", "1,250"],
            ["EC", 1.2],
        ],
    )


@pytest.fixture
def narrative_sheet() -> Worksheet:
    """Free text with no label/value grid."""
    return Worksheet.from_rows("Notes", [["pH: 6.2, Nitrogen - 0.25"]])


@pytest.fixture
def table_sheet() -> Worksheet:
    """A five-column table with a header row."""
    return Worksheet.from_rows(
        "Results",
        [
            ["Sample", "Depth", "Moisture", "Sand", "Clay"],
            ["S-1", 10, 12.5, 40, 22],
            ["S-2", 20, 13.1, 38, 25],
            ["S-3", 30, 14.0, 35, 27],
        ],
    )


@pytest.fixture
def key_value_workbook(key_value_sheet: Worksheet) -> Workbook:
    cover = Worksheet.from_rows("Cover", [["Lab report"]])
    return Workbook(sheets=(cover, key_value_sheet), file_name="report.xlsx")


@pytest.fixture
def xlsx_report(tmp_path: Path) -> Path:
    """A real .xlsx file with a cover sheet and a results sheet."""
    wb = OpenpyxlWorkbook()
    cover = wb.active
    cover.title = "Cover"
    cover["A1"] = "Farm: North field"

    results = wb.create_sheet("Leaf Results")
    results["A1"] = "pH"
    results["B1"] = 5.8
    results["A2"] = "Nitrogen"
    results["B2"] = "2.4%"
    results["A3"] = "Cu"
    results["B3"] = 9

    path = tmp_path / "leaf_report.xlsx"
    wb.save(path)
    return path


@pytest.fixture
def corrupt_xlsx(xlsx_report: Path, tmp_path: Path) -> Path:
    """A valid zip whose first worksheet holds truncated XML."""
    path = tmp_path / "corrupt.xlsx"
    with ZipFile(xlsx_report) as source, ZipFile(path, "w") as target:
        for item in source.infolist():
            data = source.read(item.filename)
            if item.filename == "xl/worksheets/sheet1.xml":
                data = b"<worksheet><sheetData><row"
            target.writestr(item, data)
    return path
