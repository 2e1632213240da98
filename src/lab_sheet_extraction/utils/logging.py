"""Structured logging for the extraction engine.

Log lines carry ``key=value`` fields after a ``|`` separator, and the
formatter prefixes every record with the workbook being processed::

    [file_name=soil.xlsx sheet=Results] Found pH | value=6.5, address=B1

The workbook context lives in a single context variable, so concurrent
batch workers each log their own file without coordination.

Usage:
    logger = get_logger(__name__)

    with LogContext(file_name="soil.xlsx", sheet="Results"):
        with timed_operation(logger, "extract") as metrics:
            metrics.cells_scanned = 120
"""

import logging
import time
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

_context_var: ContextVar[dict[str, Any] | None] = ContextVar(
    "lse_log_context", default=None
)


def get_context() -> dict[str, Any]:
    """Return a copy of the fields bound to the current context."""
    return dict(_context_var.get() or {})


def clear_context() -> None:
    _context_var.set(None)


class LogContext:
    """Bind fields to every log record emitted inside the block.

    Fields given as None are left untouched. The previous context is
    restored on exit, including when the block raises.
    """

    def __init__(self, **fields: Any) -> None:
        self._fields = {k: v for k, v in fields.items() if v is not None}
        self._token: Any = None

    def __enter__(self) -> "LogContext":
        self._token = _context_var.set({**get_context(), **self._fields})
        return self

    def __exit__(self, *args: Any) -> None:
        _context_var.reset(self._token)


@dataclass
class PerformanceMetrics:
    """Counters recorded for one extraction.

    Attributes:
        operation: Name of the measured operation.
        duration_seconds: Wall time, set by :meth:`finish`.
        cells_scanned: Non-empty cells visited by the structured scan.
        candidates_found: Parameter locations before deduplication.
        parameters_found: Distinct parameters kept.
    """

    operation: str
    duration_seconds: float = 0.0
    cells_scanned: int = 0
    candidates_found: int = 0
    parameters_found: int = 0
    _started: float = field(default_factory=time.perf_counter, repr=False)

    def finish(self) -> None:
        self.duration_seconds = time.perf_counter() - self._started

    def to_dict(self) -> dict[str, Any]:
        """Return the operation, its duration and every non-zero counter."""
        counters = {
            "cells_scanned": self.cells_scanned,
            "candidates_found": self.candidates_found,
            "parameters_found": self.parameters_found,
        }
        return {
            "operation": self.operation,
            "duration_seconds": round(self.duration_seconds, 4),
            **{name: count for name, count in counters.items() if count},
        }


class StructuredLogFormatter(logging.Formatter):
    """Formatter that prefixes messages with the bound workbook context."""

    def format(self, record: logging.LogRecord) -> str:
        context = get_context()
        if not context:
            return super().format(record)

        prefix = " ".join(f"{key}={value}" for key, value in context.items())
        message = record.msg
        record.msg = f"[{prefix}] {message}"
        try:
            return super().format(record)
        finally:
            record.msg = message


class StructuredLogger:
    """Thin wrapper over :class:`logging.Logger` that renders keyword fields."""

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    @staticmethod
    def _build_message(message: str, **fields: Any) -> str:
        if not fields:
            return message
        rendered = ", ".join(f"{key}={value}" for key, value in fields.items())
        return f"{message} | {rendered}"

    def _emit(
        self, level: int, message: str, exc_info: bool = False, **fields: Any
    ) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(
                level, self._build_message(message, **fields), exc_info=exc_info
            )

    def debug(self, message: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, **fields)

    def error(self, message: str, exc_info: bool = False, **fields: Any) -> None:
        self._emit(logging.ERROR, message, exc_info=exc_info, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._emit(logging.ERROR, message, exc_info=True, **fields)

    def log_performance(self, metrics: PerformanceMetrics) -> None:
        self.info(f"Performance: {metrics.operation}", **metrics.to_dict())

    def log_progress(
        self, stage: str, current: int, total: int, details: str | None = None
    ) -> None:
        percentage = current / total * 100 if total else 0.0
        fields: dict[str, Any] = {
            "current": current,
            "total": total,
            "percentage": f"{percentage:.1f}%",
        }
        if details:
            fields["details"] = details
        self.info(f"Progress: {stage}", **fields)

    def log_extraction_result(
        self,
        extracted_from: str,
        parameters_found: int,
        confidence: int,
        layout_type: str | None = None,
    ) -> None:
        """Log the audit summary of one worksheet extraction.

        An extraction that found nothing is logged at WARNING, since the
        caller will report "no readable parameters found".
        """
        fields: dict[str, Any] = {
            "extracted_from": extracted_from,
            "parameters_found": parameters_found,
            "confidence": confidence,
        }
        if layout_type is not None:
            fields["layout_type"] = layout_type
        level = logging.INFO if parameters_found else logging.WARNING
        self._emit(level, "Extraction completed", **fields)


@contextmanager
def timed_operation(
    logger: StructuredLogger, operation: str
) -> Generator[PerformanceMetrics, None, None]:
    """Time the block and log its metrics on exit, even when it raises."""
    metrics = PerformanceMetrics(operation=operation)
    try:
        yield metrics
    finally:
        metrics.finish()
        logger.log_performance(metrics)


class ProgressTracker:
    """Log progress through a batch of workbooks every ``log_interval`` files."""

    def __init__(
        self,
        logger: StructuredLogger,
        stage: str,
        total: int,
        log_interval: int = 1,
    ) -> None:
        self._logger = logger
        self._stage = stage
        self._total = total
        self._log_interval = log_interval
        self._current = 0
        self._started = time.perf_counter()

    def update(self, increment: int = 1, details: str | None = None) -> None:
        self._current += increment
        if self._current % self._log_interval == 0 or self._current == self._total:
            self._logger.log_progress(
                self._stage, self._current, self._total, details
            )

    def complete(self) -> float:
        """Log completion and return the elapsed seconds."""
        duration = time.perf_counter() - self._started
        self._logger.info(
            f"Completed: {self._stage}",
            total_items=self._total,
            duration_seconds=f"{duration:.2f}",
        )
        return duration


def configure_logging(
    level: int | str = logging.INFO,
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    use_structured_formatter: bool = True,
) -> None:
    """Replace the root handlers with one stream handler at ``level``."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler()
    handler.setLevel(level)
    formatter_cls = (
        StructuredLogFormatter if use_structured_formatter else logging.Formatter
    )
    handler.setFormatter(formatter_cls(format_string))

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)
