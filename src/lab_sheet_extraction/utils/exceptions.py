"""Centralized exception classes for lab sheet extraction.

This module provides a hierarchy of custom exceptions with error codes and
structured error details for consistent error handling at the boundary of
the extraction engine.

The engine itself never raises for missing data: an unreadable sheet or a
sheet without recognisable parameters yields an empty result with
confidence 0. Exceptions are reserved for loading failures, precondition
violations and caller-imposed timeouts.

Exception Hierarchy:
    LSEError (base)
    ├── WorkbookError
    │   ├── WorkbookNotFoundError
    │   ├── WorkbookLoadError
    │   ├── SheetNotFoundError
    │   └── InvalidWorkbookError
    ├── ExtractionError
    │   └── ExtractionTimeoutError
    └── ConfigurationError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and audit logs.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the application.

    Error codes are grouped by category:
    - E1xxx: Workbook/file errors
    - E4xxx: Extraction errors
    - E9xxx: Internal/configuration errors
    """

    # Workbook errors (E1xxx)
    WORKBOOK_NOT_FOUND = "E1001"
    WORKBOOK_LOAD_FAILED = "E1002"
    SHEET_NOT_FOUND = "E1003"
    INVALID_WORKBOOK = "E1004"

    # Extraction errors (E4xxx)
    EXTRACTION_FAILED = "E4001"
    EXTRACTION_TIMEOUT = "E4002"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"
    CONFIGURATION_ERROR = "E9002"


class LSEError(Exception):
    """Base exception for all lab sheet extraction errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for logs and batch reports.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# Workbook Errors (E1xxx)
# =============================================================================


class WorkbookError(LSEError):
    """Base class for workbook-related errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.WORKBOOK_LOAD_FAILED,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path to the problematic workbook.
            details: Additional details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class WorkbookNotFoundError(WorkbookError):
    """Raised when a workbook file does not exist."""

    def __init__(
        self,
        file_path: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path.

        Args:
            file_path: Path to the file that was not found.
            message: Optional custom message.
            details: Additional details.
        """
        message = message or f"Workbook not found: {file_path}"
        super().__init__(
            message=message,
            error_code=ErrorCode.WORKBOOK_NOT_FOUND,
            file_path=file_path,
            details=details,
        )


class WorkbookLoadError(WorkbookError):
    """Raised when the spreadsheet reader cannot parse a workbook."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the underlying reader failure.

        Args:
            message: Error message.
            file_path: Path or name of the workbook.
            reason: Text of the underlying reader exception.
            details: Additional details.
        """
        details = details or {}
        if reason:
            details["reason"] = reason
        super().__init__(
            message=message,
            error_code=ErrorCode.WORKBOOK_LOAD_FAILED,
            file_path=file_path,
            details=details,
        )


class SheetNotFoundError(WorkbookError):
    """Raised when a requested worksheet is not present in the workbook."""

    def __init__(
        self,
        sheet_name: str,
        available: list[str] | None = None,
        file_path: str | None = None,
    ) -> None:
        """Initialize with the missing sheet name.

        Args:
            sheet_name: Requested worksheet name.
            available: Worksheet names the workbook does contain.
            file_path: Optional workbook path.
        """
        details: dict[str, Any] = {"sheet_name": sheet_name}
        if available is not None:
            details["available_sheets"] = available
        super().__init__(
            message=f"Sheet '{sheet_name}' not found in workbook",
            error_code=ErrorCode.SHEET_NOT_FOUND,
            file_path=file_path,
            details=details,
        )
        self.sheet_name = sheet_name


class InvalidWorkbookError(WorkbookError):
    """Raised when a workbook violates an engine precondition (e.g. no sheets)."""

    def __init__(self, message: str, file_path: str | None = None) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_WORKBOOK,
            file_path=file_path,
        )


# =============================================================================
# Extraction Errors (E4xxx)
# =============================================================================


class ExtractionError(LSEError):
    """Base class for extraction-related errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXTRACTION_FAILED,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with extraction stage.

        Args:
            message: Error message.
            error_code: Error code.
            stage: The extraction stage where the error occurred.
            details: Additional details.
        """
        details = details or {}
        if stage:
            details["extraction_stage"] = stage
        super().__init__(message, error_code, details)
        self.stage = stage


class ExtractionTimeoutError(ExtractionError):
    """Raised when a caller-imposed timeout expires before extraction ends."""

    def __init__(
        self,
        timeout_seconds: float,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the exceeded timeout.

        Args:
            timeout_seconds: The timeout that was exceeded.
            file_path: Workbook being processed when the timeout fired.
            details: Additional details.
        """
        details = details or {}
        details["timeout_seconds"] = timeout_seconds
        if file_path:
            details["file_path"] = file_path
        super().__init__(
            message=f"Extraction did not finish within {timeout_seconds}s",
            error_code=ErrorCode.EXTRACTION_TIMEOUT,
            stage="batch",
            details=details,
        )
        self.timeout_seconds = timeout_seconds


# =============================================================================
# Configuration Errors (E9xxx)
# =============================================================================


class ConfigurationError(LSEError):
    """Raised when engine settings are inconsistent."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the offending setting name.

        Args:
            message: Error message.
            setting: Name of the setting that is invalid.
            details: Additional details.
        """
        details = details or {}
        if setting:
            details["setting"] = setting
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)
        self.setting = setting
