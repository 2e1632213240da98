"""Deduplicate parameter candidates and score the overall extraction."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from lab_sheet_extraction.models import ParameterLocation


@dataclass(frozen=True)
class ConfidenceWeights:
    """Constants of the overall-confidence formula.

    overall = min(cap, round(base + mean * average_weight + parameter_bonus
    + structure_bonus)), where parameter_bonus grows by ``per_parameter``
    for each kept parameter up to ``max_parameter_bonus`` and the structure
    bonus applies when the mean exceeds ``structure_threshold``.
    """

    base: int = 30
    average_weight: float = 0.4
    per_parameter: int = 5
    max_parameter_bonus: int = 30
    structure_bonus: int = 15
    structure_threshold: int = 80
    cap: int = 95


@dataclass(frozen=True)
class AggregatedLocations:
    """Winning location per parameter plus the maps built from them."""

    winners: dict[str, ParameterLocation]
    values: dict[str, float]
    cell_references: dict[str, str]


def deduplicate(locations: Iterable[ParameterLocation]) -> AggregatedLocations:
    """Keep the highest-confidence location for each parameter.

    On equal confidence the location seen first is kept.
    """
    winners: dict[str, ParameterLocation] = {}
    for location in locations:
        best = winners.get(location.parameter)
        if best is None or location.confidence > best.confidence:
            winners[location.parameter] = location

    return AggregatedLocations(
        winners=winners,
        values={name: loc.value for name, loc in winners.items()},
        cell_references={name: loc.reference for name, loc in winners.items()},
    )


def overall_confidence(
    winners: Iterable[ParameterLocation],
    weights: ConfidenceWeights | None = None,
) -> int:
    """Score an extraction from its kept locations; 0 when there are none."""
    w = weights or ConfidenceWeights()
    scores = [loc.confidence for loc in winners]
    if not scores:
        return 0

    average = sum(scores) / len(scores)
    parameter_bonus = min(len(scores) * w.per_parameter, w.max_parameter_bonus)
    structure_bonus = w.structure_bonus if average > w.structure_threshold else 0
    total = w.base + average * w.average_weight + parameter_bonus + structure_bonus
    # half-up rounding, not banker's
    return max(0, min(w.cap, math.floor(total + 0.5)))
