"""Tests for header/data table parsing."""

import pandas as pd

from lab_sheet_extraction.services.table_parser import parse_table_structure
from lab_sheet_extraction.workbook import Worksheet


class TestParseTableStructure:
    """Tests for parse_table_structure."""

    def test_headers_and_rows(self, table_sheet: Worksheet) -> None:
        table = parse_table_structure(table_sheet)

        assert table.headers == ["Sample", "Depth", "Moisture", "Sand", "Clay"]
        assert len(table.data) == 3
        assert table.data[0] == {
            "Sample": "S-1",
            "Depth": 10.0,
            "Moisture": 12.5,
            "Sand": 40.0,
            "Clay": 22.0,
        }

    def test_first_non_empty_row_is_header(self) -> None:
        sheet = Worksheet.from_rows("S", [[None], ["Element", "ppm"], ["Zn", 3]])
        table = parse_table_structure(sheet)
        assert table.headers == ["Element", "ppm"]
        assert table.data == [{"Element": "Zn", "ppm": 3.0}]

    def test_numeric_headers_are_stringified(self) -> None:
        sheet = Worksheet.from_rows("S", [["Depth", 2024, 2.5]])
        assert parse_table_structure(sheet).headers == ["Depth", "2024", "2.5"]

    def test_missing_cells_are_none(self) -> None:
        sheet = Worksheet.from_rows("S", [["A", "B"], ["x", None, "extra"]])
        assert parse_table_structure(sheet).data == [{"A": "x", "B": None}]

    def test_empty_sheet(self) -> None:
        table = parse_table_structure(Worksheet("Empty"))
        assert table.headers == []
        assert table.data == []

    def test_to_dataframe(self, table_sheet: Worksheet) -> None:
        df = parse_table_structure(table_sheet).to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["Sample", "Depth", "Moisture", "Sand", "Clay"]
        assert df.iloc[1]["Sample"] == "S-2"
        assert df["Clay"].sum() == 74.0

    def test_exported_from_services_package(self, table_sheet: Worksheet) -> None:
        from lab_sheet_extraction import services

        table = services.parse_table_structure(table_sheet)
        assert isinstance(table, services.TableStructure)
        assert "TableStructure" in services.__all__
