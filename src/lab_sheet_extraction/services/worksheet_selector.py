"""Pick the worksheet most likely to hold the lab results."""

from __future__ import annotations

from lab_sheet_extraction.utils.exceptions import InvalidWorkbookError
from lab_sheet_extraction.utils.logging import get_logger
from lab_sheet_extraction.workbook import Workbook, Worksheet

logger = get_logger(__name__)

PREFERRED_NAME_FRAGMENTS: tuple[str, ...] = (
    "analysis",
    "results",
    "data",
    "soil",
    "leaf",
    "nutrient",
)


def select_worksheet(
    workbook: Workbook,
    fragments: tuple[str, ...] = PREFERRED_NAME_FRAGMENTS,
) -> Worksheet:
    """Return the worksheet to analyse.

    Fragments are tried in priority order; the first worksheet whose name
    contains the fragment (case-insensitively) wins. Without a name match the
    first worksheet with any rows is used, and failing that the first
    worksheet.

    Raises:
        InvalidWorkbookError: If the workbook has no worksheets.
    """
    if not workbook.sheets:
        raise InvalidWorkbookError(
            "Workbook contains no worksheets", file_path=workbook.file_name
        )

    for fragment in fragments:
        for sheet in workbook.sheets:
            if fragment in sheet.name.lower():
                logger.debug(
                    "Worksheet matched preferred name",
                    sheet=sheet.name,
                    fragment=fragment,
                )
                return sheet

    for sheet in workbook.sheets:
        if sheet.row_count > 0:
            return sheet

    return workbook.sheets[0]
