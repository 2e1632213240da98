"""Utilities package for lab sheet extraction.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from lab_sheet_extraction.utils.exceptions import (
    ConfigurationError,
    ErrorCode,
    ExtractionError,
    ExtractionTimeoutError,
    InvalidWorkbookError,
    LSEError,
    SheetNotFoundError,
    WorkbookError,
    WorkbookLoadError,
    WorkbookNotFoundError,
)
from lab_sheet_extraction.utils.logging import (
    LogContext,
    StructuredLogger,
    configure_logging,
    get_context,
    get_logger,
)

__all__ = [
    # Exceptions
    "ConfigurationError",
    "ErrorCode",
    "ExtractionError",
    "ExtractionTimeoutError",
    "InvalidWorkbookError",
    "LSEError",
    "SheetNotFoundError",
    "WorkbookError",
    "WorkbookLoadError",
    "WorkbookNotFoundError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "configure_logging",
    "get_context",
    "get_logger",
]
