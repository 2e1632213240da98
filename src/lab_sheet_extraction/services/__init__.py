"""Services for lab sheet extraction."""

from lab_sheet_extraction.services.batch import BatchItem, extract_files
from lab_sheet_extraction.services.parameter_dictionary import (
    DEFAULT_DICTIONARY,
    ParameterDictionary,
)
from lab_sheet_extraction.services.parameter_extractor import (
    ParameterExtractor,
    extract,
    extract_from_path,
)
from lab_sheet_extraction.services.table_parser import (
    TableStructure,
    parse_table_structure,
)
from lab_sheet_extraction.services.workbook_loader import (
    WorkbookLoader,
    WorkbookLoadOptions,
)

__all__ = [
    "DEFAULT_DICTIONARY",
    "BatchItem",
    "ParameterDictionary",
    "ParameterExtractor",
    "TableStructure",
    "WorkbookLoadOptions",
    "WorkbookLoader",
    "extract",
    "extract_files",
    "extract_from_path",
    "parse_table_structure",
]
