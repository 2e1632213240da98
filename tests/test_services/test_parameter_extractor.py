"""Tests for the end-to-end parameter extractor."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from openpyxl import Workbook as OpenpyxlWorkbook

from lab_sheet_extraction.config import Settings
from lab_sheet_extraction.models import LayoutType
from lab_sheet_extraction.services.parameter_dictionary import ParameterDictionary
from lab_sheet_extraction.services.parameter_extractor import (
    ParameterExtractor,
    extract,
    extract_from_path,
)
from lab_sheet_extraction.utils.exceptions import WorkbookNotFoundError
from lab_sheet_extraction.workbook import SheetCell, Workbook, Worksheet


def _workbook(*rows: list[object], name: str = "Sheet1") -> Workbook:
    return Workbook(sheets=(Worksheet.from_rows(name, list(rows)),))


@pytest.fixture
def extractor(default_settings: Settings) -> ParameterExtractor:
    return ParameterExtractor(settings=default_settings)


class TestStructuredExtraction:
    """Tests for label/value extraction."""

    def test_key_value_report(
        self, extractor: ParameterExtractor, key_value_workbook: Workbook
    ) -> None:
        result = extractor.extract(key_value_workbook)

        assert result.values == {
            "pH": 6.5,
            "nitrogen": 0.25,
            "potassium": 120.0,
            "calcium": 1250.0,
            "electricalConductivity": 1.2,
        }
        assert result.cell_references["pH"] == "A1 → B1"
        assert result.cell_references["electricalConductivity"] == "A5 → B5"
        assert result.confidence == 95
        assert result.extracted_from == "Soil Analysis"
        assert result.sheet_names == ["Cover", "Soil Analysis"]
        assert result.file_name == "report.xlsx"
        assert result.layout_type == LayoutType.KEY_VALUE

    def test_right_neighbour_wins_over_below(
        self, extractor: ParameterExtractor
    ) -> None:
        wb = _workbook(
            [None, None, None],
            [None, "pH", 6.5],
            [None, 7.0, None],
        )

        result = extractor.extract(wb)

        assert result.values == {"pH": 6.5}
        assert result.cell_references == {"pH": "B2 → C2"}
        # 30 + 90 * 0.4 + 5 + 15
        assert result.confidence == 86

    def test_duplicate_labels_keep_highest_confidence(
        self, extractor: ParameterExtractor
    ) -> None:
        wb = _workbook(
            ["pH", None, None],
            [6.1, None, None],
            [None, None, None],
            [None, "pH", 6.4],
        )
        result = extractor.extract(wb)
        assert result.values == {"pH": 6.4}
        assert result.cell_references == {"pH": "B4 → C4"}

    def test_fallback_not_used_when_structured_match_exists(
        self, extractor: ParameterExtractor
    ) -> None:
        wb = _workbook(["pH", 6.5], [], [], [], ["Notes: nitrogen 0.3"])
        assert extractor.extract(wb).values == {"pH": 6.5}


class TestFallbackExtraction:
    """Tests for the regex fallback path."""

    def test_narrative_sheet(
        self, extractor: ParameterExtractor, narrative_sheet: Worksheet
    ) -> None:
        result = extractor.extract(Workbook(sheets=(narrative_sheet,)))

        assert result.values == {"pH": 6.2, "nitrogen": 0.25}
        assert result.cell_references == {
            "pH": "Pattern Match",
            "nitrogen": "Pattern Match",
        }
        # 30 + 50 * 0.4 + 10
        assert result.confidence == 60

    def test_fallback_confidence_setting(self, narrative_sheet: Worksheet) -> None:
        s = Settings(_env_file=None, fallback_confidence=40)
        result = extract(Workbook(sheets=(narrative_sheet,)), settings=s)
        # 30 + 40 * 0.4 + 10
        assert result.confidence == 56


class TestEmptyResults:
    """Tests for sheets without readable parameters."""

    def test_empty_worksheet(self, extractor: ParameterExtractor) -> None:
        result = extractor.extract(Workbook(sheets=(Worksheet("Sheet1"),)))

        assert result.values == {}
        assert result.cell_references == {}
        assert result.confidence == 0
        assert result.is_empty
        assert result.extracted_from == "Sheet1"
        assert result.layout_type == LayoutType.MIXED

    def test_value_out_of_reach(self, extractor: ParameterExtractor) -> None:
        result = extractor.extract(_workbook(["pH", None, None, 6.5]))
        assert result.values == {}
        assert result.confidence == 0

    def test_empty_result_logged_as_warning(
        self, extractor: ParameterExtractor, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="lab_sheet_extraction"):
            extractor.extract(Workbook(sheets=(Worksheet("Sheet1"),)))
        records = [r for r in caplog.records if "Extraction completed" in r.message]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING


class TestInjectedDependencies:
    """Tests for dictionary and settings injection."""

    def test_fallback_ignores_injected_dictionary(
        self, default_settings: Settings, narrative_sheet: Worksheet
    ) -> None:
        """The regex fallback keeps its own fixed patterns."""
        d = ParameterDictionary({"sodium": ["sodium", "na"]})
        result = extract(
            Workbook(sheets=(narrative_sheet,)), dictionary=d, settings=default_settings
        )
        assert result.values == {"pH": 6.2, "nitrogen": 0.25}

    def test_custom_dictionary(self, default_settings: Settings) -> None:
        d = ParameterDictionary({"sodium": ["sodium", "na"]})
        result = extract(_workbook(["Sodium", 45]), dictionary=d, settings=default_settings)
        assert result.values == {"sodium": 45.0}

    def test_fuzzy_threshold_setting(self) -> None:
        d = ParameterDictionary({"nitrogen": ["nitrogen"]})
        wb = _workbook(["Nitrgen", 0.3])

        lenient = extract(wb, dictionary=d, settings=Settings(_env_file=None))
        strict = extract(
            wb,
            dictionary=d,
            settings=Settings(_env_file=None, fuzzy_match_threshold=0.9),
        )

        assert lenient.values == {"nitrogen": 0.3}
        assert strict.values == {}

    def test_extraction_is_deterministic(
        self, extractor: ParameterExtractor, key_value_workbook: Workbook
    ) -> None:
        first = extractor.extract(key_value_workbook)
        second = extractor.extract(key_value_workbook)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_result_serializes_for_telemetry(
        self, extractor: ParameterExtractor, key_value_workbook: Workbook
    ) -> None:
        data = extractor.extract(key_value_workbook).to_dict()
        assert data["layout_type"] == "key-value"
        assert data["extracted_from"] == "Soil Analysis"
        assert set(data["cell_references"]) == set(data["values"])


class TestExtractFromPath:
    """Tests for loading and extracting a real file."""

    def test_leaf_report(self, xlsx_report: Path, default_settings: Settings) -> None:
        result = extract_from_path(xlsx_report, settings=default_settings)

        assert result.values == {"pH": 5.8, "nitrogen": 2.4, "copper": 9.0}
        assert result.extracted_from == "Leaf Results"
        assert result.sheet_names == ["Cover", "Leaf Results"]
        assert result.file_name == "leaf_report.xlsx"
        assert result.confidence == 95

    def test_missing_file(self, tmp_path: Path, default_settings: Settings) -> None:
        with pytest.raises(WorkbookNotFoundError):
            extract_from_path(tmp_path / "missing.xlsx", settings=default_settings)


class TestFormulaCells:
    """Tests for formula cells next to labels."""

    def test_uncalculated_formula_is_not_a_value(
        self, tmp_path: Path, default_settings: Settings
    ) -> None:
        wb = OpenpyxlWorkbook()
        ws = wb.active
        ws["A1"] = "pH"
        ws["B1"] = "=AVERAGE(C1:D1)"
        ws["C1"] = 6.2
        ws["D1"] = 6.4
        path = tmp_path / "formulas.xlsx"
        wb.save(path)

        result = extract_from_path(path, settings=default_settings)

        assert result.values == {"pH": 6.2}
        assert result.cell_references == {"pH": "A1 → C1"}
        # 30 + 75 * 0.4 + 5
        assert result.confidence == 65

    def test_uncalculated_formula_is_not_a_label(
        self, extractor: ParameterExtractor
    ) -> None:
        wb = Workbook(
            sheets=(
                Worksheet(
                    "Sheet1",
                    {
                        (1, 1): SheetCell.formula_cell(None, "=SUM(N1:N5)"),
                        (1, 2): SheetCell.number(15),
                    },
                ),
            )
        )
        result = extractor.extract(wb)
        assert result.values == {}
        assert result.confidence == 0


class TestDebugLogging:
    """Tests for per-match logging in debug mode."""

    def test_matches_logged_in_debug_mode(
        self, key_value_sheet: Worksheet, caplog: pytest.LogCaptureFixture
    ) -> None:
        extractor = ParameterExtractor(settings=Settings(_env_file=None, debug=True))
        with caplog.at_level(logging.DEBUG, logger="lab_sheet_extraction"):
            extractor.extract(Workbook(sheets=(key_value_sheet,)))
        assert any(r.message.startswith("Found pH") for r in caplog.records)

    def test_matches_not_logged_by_default(
        self,
        extractor: ParameterExtractor,
        key_value_sheet: Worksheet,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="lab_sheet_extraction"):
            extractor.extract(Workbook(sheets=(key_value_sheet,)))
        assert not [r for r in caplog.records if r.message.startswith("Found ")]
        assert any("Extraction completed" in r.message for r in caplog.records)
