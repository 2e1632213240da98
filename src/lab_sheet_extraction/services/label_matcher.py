"""Decide whether a cell's text names a chemical parameter.

A label matches a variant when the variant appears in it verbatim, appears
in it once whitespace is removed from both, or is within a normalized edit
distance of it. The edit-distance check tolerates typos such as "Nitrgen"
in hand-typed header rows.
"""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

from lab_sheet_extraction.services.parameter_dictionary import ParameterDictionary

DEFAULT_FUZZY_THRESHOLD = 0.8

_WHITESPACE_RE = re.compile(r"\s+")


def similarity(a: str, b: str) -> float:
    """Return ``1 - distance(a, b) / max(len(a), len(b))``.

    Distance is the unit-cost Levenshtein distance over the full strings.
    Two empty strings are identical.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - Levenshtein.distance(a, b) / longest


def matches(
    cell_text: str, variant: str, threshold: float = DEFAULT_FUZZY_THRESHOLD
) -> bool:
    """Return True if ``cell_text`` denotes the parameter ``variant``.

    Both arguments are expected lowercase.
    """
    if variant in cell_text:
        return True
    if _WHITESPACE_RE.sub("", variant) in _WHITESPACE_RE.sub("", cell_text):
        return True
    return similarity(cell_text, variant) >= threshold


def find_parameter(
    cell_text: str,
    dictionary: ParameterDictionary,
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> tuple[str, str] | None:
    """Return ``(canonical_name, variant)`` for the first matching parameter.

    Parameters are tried in dictionary order and variants in listed order,
    so the result is deterministic for a given dictionary.
    """
    for name, variants in dictionary.items():
        for variant in variants:
            if matches(cell_text, variant, threshold):
                return name, variant
    return None
