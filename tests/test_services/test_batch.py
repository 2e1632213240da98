"""Tests for concurrent batch extraction."""

from __future__ import annotations

import time
from pathlib import Path

import pytest

from lab_sheet_extraction.config import Settings
from lab_sheet_extraction.models import ExtractionResult
from lab_sheet_extraction.services import batch
from lab_sheet_extraction.services.batch import extract_files

pytestmark = pytest.mark.asyncio


async def test_results_follow_input_order(
    xlsx_report: Path, tmp_path: Path, default_settings: Settings
) -> None:
    missing = tmp_path / "missing.xlsx"

    items = await extract_files(
        [xlsx_report, missing, str(xlsx_report)], settings=default_settings
    )

    assert [item.path for item in items] == [xlsx_report, missing, xlsx_report]
    assert [item.succeeded for item in items] == [True, False, True]

    first = items[0].result
    assert first is not None
    assert first.values["pH"] == 5.8
    assert items[1].error is not None
    assert items[1].error["error_code"] == "E1001"


async def test_unreadable_file_reported(
    tmp_path: Path, default_settings: Settings
) -> None:
    bogus = tmp_path / "notes.xlsx"
    bogus.write_text("not a spreadsheet")

    [item] = await extract_files([bogus], settings=default_settings)

    assert item.result is None
    assert item.error is not None
    assert item.error["error_code"] == "E1002"


async def test_timeout_does_not_affect_other_files(
    monkeypatch: pytest.MonkeyPatch, default_settings: Settings
) -> None:
    def fake_extract(path: Path, dictionary: object, settings: Settings) -> ExtractionResult:
        if path.name == "slow.xlsx":
            time.sleep(0.5)
        return ExtractionResult(extracted_from="Sheet1", file_name=path.name)

    monkeypatch.setattr(batch, "extract_from_path", fake_extract)

    items = await extract_files(
        [Path("slow.xlsx"), Path("fast.xlsx")],
        settings=default_settings,
        timeout_seconds=0.05,
    )

    slow, fast = items
    assert slow.error is not None
    assert slow.error["error_code"] == "E4002"
    assert slow.error["details"]["timeout_seconds"] == 0.05
    assert fast.succeeded
    assert fast.result is not None
    assert fast.result.file_name == "fast.xlsx"


async def test_single_worker(xlsx_report: Path, default_settings: Settings) -> None:
    items = await extract_files(
        [xlsx_report, xlsx_report], settings=default_settings, max_concurrency=1
    )
    assert all(item.succeeded for item in items)


async def test_empty_batch(default_settings: Settings) -> None:
    assert await extract_files([], settings=default_settings) == []


async def test_malformed_xml_does_not_abort_batch(
    xlsx_report: Path, corrupt_xlsx: Path, default_settings: Settings
) -> None:
    good, bad = await extract_files(
        [xlsx_report, corrupt_xlsx], settings=default_settings
    )

    assert good.succeeded
    assert good.result is not None
    assert good.result.values["pH"] == 5.8
    assert bad.error is not None
    assert bad.error["error_code"] == "E1002"


async def test_unexpected_error_reported_per_file(
    monkeypatch: pytest.MonkeyPatch, default_settings: Settings
) -> None:
    def fake_extract(path: Path, dictionary: object, settings: Settings) -> ExtractionResult:
        if path.name == "broken.xlsx":
            raise RuntimeError("reader crashed")
        return ExtractionResult(extracted_from="Sheet1", file_name=path.name)

    monkeypatch.setattr(batch, "extract_from_path", fake_extract)

    broken, fine = await extract_files(
        [Path("broken.xlsx"), Path("fine.xlsx")], settings=default_settings
    )

    assert broken.error is not None
    assert broken.error["error_code"] == "E4001"
    assert broken.error["details"]["error_type"] == "RuntimeError"
    assert broken.error["details"]["extraction_stage"] == "batch"
    assert "reader crashed" in broken.error["message"]
    assert fine.succeeded
