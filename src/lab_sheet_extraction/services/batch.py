"""Concurrent extraction over many workbook files.

The engine itself is synchronous and has no cancellation points, so each
file's load and extraction runs in a worker thread. A per-file timeout
bounds how long the caller waits; a file that fails or times out is
reported without affecting the others.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lab_sheet_extraction.config import Settings
from lab_sheet_extraction.config import settings as default_settings
from lab_sheet_extraction.models import ExtractionResult
from lab_sheet_extraction.services.parameter_dictionary import ParameterDictionary
from lab_sheet_extraction.services.parameter_extractor import extract_from_path
from lab_sheet_extraction.utils.exceptions import (
    ExtractionError,
    ExtractionTimeoutError,
    LSEError,
)
from lab_sheet_extraction.utils.logging import ProgressTracker, get_logger

logger = get_logger(__name__)


@dataclass
class BatchItem:
    """Outcome of one file in a batch run."""

    path: Path
    result: ExtractionResult | None = None
    error: dict[str, Any] | None = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None


async def extract_files(
    paths: Sequence[Path | str],
    dictionary: ParameterDictionary | None = None,
    settings: Settings | None = None,
    timeout_seconds: float | None = None,
    max_concurrency: int | None = None,
) -> list[BatchItem]:
    """Extract every workbook in ``paths`` concurrently.

    Args:
        paths: Workbook files to process.
        dictionary: Synonym dictionary shared by all files.
        settings: Engine settings; the environment-derived ones when None.
        timeout_seconds: Per-file timeout; ``settings.batch_timeout_seconds``
            when None.
        max_concurrency: Files processed at once;
            ``settings.batch_max_concurrency`` when None.

    Returns:
        One BatchItem per input path, in input order.
    """
    s = settings if settings is not None else default_settings
    timeout = timeout_seconds if timeout_seconds is not None else s.batch_timeout_seconds
    limit = max_concurrency if max_concurrency is not None else s.batch_max_concurrency

    semaphore = asyncio.Semaphore(limit)
    tracker = ProgressTracker(logger, "Extracting workbooks", total=len(paths))

    async def run_one(raw_path: Path | str) -> BatchItem:
        path = Path(raw_path)
        async with semaphore:
            try:
                result = await asyncio.wait_for(
                    asyncio.to_thread(extract_from_path, path, dictionary, s),
                    timeout=timeout,
                )
            except TimeoutError:
                error = ExtractionTimeoutError(timeout, file_path=str(path))
                logger.warning("Extraction timed out", file=path.name, timeout=timeout)
                item = BatchItem(path=path, error=error.to_dict())
            except LSEError as exc:
                logger.error("Extraction failed", file=path.name, error=str(exc))
                item = BatchItem(path=path, error=exc.to_dict())
            except Exception as exc:
                logger.exception(
                    "Extraction failed unexpectedly",
                    file=path.name,
                    error_type=type(exc).__name__,
                )
                error = ExtractionError(
                    f"Unexpected error while extracting {path.name}: {exc}",
                    stage="batch",
                    details={"file_path": str(path), "error_type": type(exc).__name__},
                )
                item = BatchItem(path=path, error=error.to_dict())
            else:
                item = BatchItem(path=path, result=result)
        tracker.update(details=path.name)
        return item

    items = await asyncio.gather(*(run_one(p) for p in paths))
    tracker.complete()
    return list(items)
