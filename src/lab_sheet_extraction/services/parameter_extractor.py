"""Extract named chemical parameters from a lab-report workbook.

The extractor is a pure function of its inputs: the workbook, the synonym
dictionary and the settings. It keeps no state between calls, so one
instance can be shared across threads.

Pipeline:
    1. Pick the worksheet most likely to hold results.
    2. For each text cell naming a parameter, look for a number next to it.
    3. If nothing was found, scan the flattened sheet text with regexes.
    4. Keep the best candidate per parameter and score the extraction.
    5. Classify the sheet layout for metadata.
"""

from __future__ import annotations

from pathlib import Path

from lab_sheet_extraction.config import Settings
from lab_sheet_extraction.config import settings as default_settings
from lab_sheet_extraction.models import ExtractionResult, ParameterLocation
from lab_sheet_extraction.services.cell_normalizer import cell_text
from lab_sheet_extraction.services.confidence import (
    ConfidenceWeights,
    deduplicate,
    overall_confidence,
)
from lab_sheet_extraction.services.label_matcher import find_parameter
from lab_sheet_extraction.services.layout_classifier import classify_layout
from lab_sheet_extraction.services.parameter_dictionary import (
    DEFAULT_DICTIONARY,
    ParameterDictionary,
)
from lab_sheet_extraction.services.pattern_extractor import extract_by_patterns
from lab_sheet_extraction.services.proximity_search import find_value_near
from lab_sheet_extraction.services.workbook_loader import (
    WorkbookLoader,
    WorkbookLoadOptions,
)
from lab_sheet_extraction.services.worksheet_selector import select_worksheet
from lab_sheet_extraction.utils.logging import LogContext, get_logger, timed_operation
from lab_sheet_extraction.workbook import Workbook, Worksheet, cell_address

logger = get_logger(__name__)


class ParameterExtractor:
    """Heuristic extractor of chemical parameters from spreadsheets."""

    def __init__(
        self,
        dictionary: ParameterDictionary | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            dictionary: Synonym dictionary; the built-in one when None.
            settings: Engine settings; the environment-derived ones when None.
        """
        self._dictionary = dictionary if dictionary is not None else DEFAULT_DICTIONARY
        self._settings = settings if settings is not None else default_settings
        self._weights = ConfidenceWeights(
            base=self._settings.base_confidence,
            average_weight=self._settings.average_weight,
            per_parameter=self._settings.per_parameter_bonus,
            max_parameter_bonus=self._settings.max_parameter_bonus,
            structure_bonus=self._settings.structure_bonus,
            structure_threshold=self._settings.structure_bonus_threshold,
            cap=self._settings.confidence_cap,
        )

    @property
    def dictionary(self) -> ParameterDictionary:
        return self._dictionary

    def extract(self, workbook: Workbook) -> ExtractionResult:
        """Extract parameters from the best worksheet of ``workbook``.

        Never raises for missing data: a sheet with no recognisable
        parameters yields empty ``values`` and confidence 0.

        Raises:
            InvalidWorkbookError: If the workbook has no worksheets.
        """
        worksheet = select_worksheet(workbook)

        with LogContext(file_name=workbook.file_name, sheet=worksheet.name):
            logger.info("Processing worksheet", rows=worksheet.row_count)

            with timed_operation(logger, "extract") as metrics:
                locations = self.find_structured(worksheet)
                metrics.cells_scanned = len(worksheet.cells)

                if not locations:
                    logger.info("No label/value pairs found, using pattern fallback")
                    locations = extract_by_patterns(
                        worksheet, confidence=self._settings.fallback_confidence
                    )

                aggregated = deduplicate(locations)
                confidence = overall_confidence(
                    aggregated.winners.values(), self._weights
                )
                layout = classify_layout(
                    worksheet, threshold=self._settings.layout_ratio_threshold
                )
                metrics.candidates_found = len(locations)
                metrics.parameters_found = len(aggregated.winners)

            logger.log_extraction_result(
                extracted_from=worksheet.name,
                parameters_found=len(aggregated.winners),
                confidence=confidence,
                layout_type=layout.value,
            )

        return ExtractionResult(
            values=aggregated.values,
            cell_references=aggregated.cell_references,
            confidence=confidence,
            sheet_names=workbook.sheet_names,
            extracted_from=worksheet.name,
            file_name=workbook.file_name,
            layout_type=layout,
        )

    def find_structured(self, worksheet: Worksheet) -> list[ParameterLocation]:
        """Return a location for every label cell with a numeric neighbour.

        Each text cell is attributed to the first parameter whose variant it
        matches; cells that match nothing, or whose neighbours hold no
        number, are skipped.
        """
        threshold = self._settings.fuzzy_match_threshold
        locations: list[ParameterLocation] = []

        for row, column, cell in worksheet.iter_cells():
            text = cell_text(cell)
            if text is None:
                continue

            found = find_parameter(text, self._dictionary, threshold)
            if found is None:
                continue

            parameter, _ = found
            match = find_value_near(worksheet, row, column)
            if match is None:
                continue

            location = ParameterLocation(
                parameter=parameter,
                value=match.value,
                cell_address=match.address,
                confidence=match.confidence,
                label_address=cell_address(row, column),
            )
            locations.append(location)
            if self._settings.debug:
                logger.debug(
                    f"Found {parameter}",
                    value=match.value,
                    confidence=match.confidence,
                    address=match.address,
                )

        return locations


def extract(
    workbook: Workbook,
    dictionary: ParameterDictionary | None = None,
    settings: Settings | None = None,
) -> ExtractionResult:
    """Extract parameters from ``workbook`` with a one-off extractor."""
    return ParameterExtractor(dictionary, settings).extract(workbook)


def extract_from_path(
    file_path: Path | str,
    dictionary: ParameterDictionary | None = None,
    settings: Settings | None = None,
) -> ExtractionResult:
    """Load a workbook file and extract its parameters.

    Raises:
        WorkbookNotFoundError: If the file does not exist.
        WorkbookLoadError: If the file cannot be parsed.
    """
    s = settings if settings is not None else default_settings
    workbook = WorkbookLoader(WorkbookLoadOptions.from_settings(s)).load_path(file_path)
    return extract(workbook, dictionary, s)
