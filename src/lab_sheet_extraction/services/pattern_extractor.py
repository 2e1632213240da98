"""Regex fallback for narrative-style sheets with no label/value grid.

All text in the worksheet is flattened into one lowercase blob and scanned
with one expression per parameter. Cell provenance is lost in the process,
so every match carries a placeholder address and a reduced confidence.
"""

from __future__ import annotations

import re

from lab_sheet_extraction.models import PATTERN_MATCH_ADDRESS, ParameterLocation
from lab_sheet_extraction.services.cell_normalizer import cell_text
from lab_sheet_extraction.workbook import Worksheet

DEFAULT_FALLBACK_CONFIDENCE = 50

_VALUE_SUFFIX = r"\s*[:\-=]?\s*(\d+\.?\d*)"


def _pattern(*synonyms: str) -> re.Pattern[str]:
    return re.compile(f"(?:{'|'.join(synonyms)}){_VALUE_SUFFIX}", re.IGNORECASE)


# fixed synonym set, independent of any injected ParameterDictionary
FALLBACK_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("pH", _pattern("ph")),
    ("nitrogen", _pattern("nitrogen", "n")),
    ("phosphorus", _pattern("phosphorus", "p2o5", "p")),
    ("potassium", _pattern("potassium", "k2o", "k")),
    ("calcium", _pattern("calcium", "ca")),
    ("magnesium", _pattern("magnesium", "mg")),
    ("organicMatter", _pattern(r"organic\s*matter", "om")),
    ("electricalConductivity", _pattern(r"electrical\s*conductivity", "ec")),
)


def flatten_text(worksheet: Worksheet) -> str:
    """Join the lowercase text of every text cell, row-major, space-separated."""
    return " ".join(
        text
        for _, _, cell in worksheet.iter_cells()
        if (text := cell_text(cell)) is not None
    )


def extract_by_patterns(
    worksheet: Worksheet,
    confidence: int = DEFAULT_FALLBACK_CONFIDENCE,
    patterns: tuple[tuple[str, re.Pattern[str]], ...] = FALLBACK_PATTERNS,
) -> list[ParameterLocation]:
    """Return one location per parameter whose pattern matches the sheet text."""
    blob = flatten_text(worksheet)
    if not blob:
        return []

    locations: list[ParameterLocation] = []
    for parameter, pattern in patterns:
        match = pattern.search(blob)
        if match is None:
            continue
        locations.append(
            ParameterLocation(
                parameter=parameter,
                value=float(match.group(1)),
                cell_address=PATTERN_MATCH_ADDRESS,
                confidence=confidence,
            )
        )
    return locations
