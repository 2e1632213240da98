"""Lab Sheet Extraction - heuristic parameter extraction from lab spreadsheets."""

from lab_sheet_extraction.config import Settings, configure
from lab_sheet_extraction.models import ExtractionResult, LayoutType, ParameterLocation
from lab_sheet_extraction.services import (
    DEFAULT_DICTIONARY,
    BatchItem,
    ParameterDictionary,
    ParameterExtractor,
    TableStructure,
    WorkbookLoader,
    extract,
    extract_files,
    extract_from_path,
    parse_table_structure,
)
from lab_sheet_extraction.workbook import CellKind, SheetCell, Workbook, Worksheet

__all__ = [
    "DEFAULT_DICTIONARY",
    "BatchItem",
    "CellKind",
    "ExtractionResult",
    "LayoutType",
    "ParameterDictionary",
    "ParameterExtractor",
    "ParameterLocation",
    "Settings",
    "SheetCell",
    "TableStructure",
    "Workbook",
    "WorkbookLoader",
    "Worksheet",
    "configure",
    "extract",
    "extract_files",
    "extract_from_path",
    "parse_table_structure",
]
__version__ = "0.1.0"
