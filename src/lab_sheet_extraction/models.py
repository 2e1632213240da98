"""Result models produced by the extraction engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

PATTERN_MATCH_ADDRESS = "Pattern Match"
"""Placeholder address for values recovered from flattened sheet text."""


class LayoutType(str, Enum):
    """Advisory classification of a worksheet's layout."""

    KEY_VALUE = "key-value"
    TABLE = "table"
    MIXED = "mixed"


@dataclass(frozen=True)
class ParameterLocation:
    """One candidate value found for a canonical parameter.

    Attributes:
        parameter: Canonical parameter name (e.g. ``nitrogen``).
        value: Numeric value read from the sheet.
        cell_address: A1 address of the value cell, or
            ``PATTERN_MATCH_ADDRESS`` for fallback matches.
        confidence: Heuristic certainty of this match, 0-100.
        label_address: A1 address of the label cell, when known.
    """

    parameter: str
    value: float
    cell_address: str
    confidence: int
    label_address: str | None = None

    @property
    def reference(self) -> str:
        """Human-readable provenance, ``label → value`` when the label is known."""
        if self.label_address is None:
            return self.cell_address
        return f"{self.label_address} → {self.cell_address}"


class ExtractionResult(BaseModel):
    """Terminal output of one worksheet extraction pass."""

    model_config = ConfigDict(frozen=True)

    values: dict[str, float] = Field(
        default_factory=dict,
        description="Best value per canonical parameter name",
    )
    cell_references: dict[str, str] = Field(
        default_factory=dict,
        description="Provenance per canonical parameter, same keys as values",
    )
    confidence: int = Field(
        default=0, ge=0, le=100, description="Overall extraction confidence"
    )
    sheet_names: list[str] = Field(
        default_factory=list, description="All worksheet names in the workbook"
    )
    extracted_from: str = Field(..., description="Name of the worksheet analysed")
    file_name: str | None = Field(
        default=None, description="Source file name, when known"
    )
    layout_type: LayoutType = Field(
        default=LayoutType.MIXED, description="Advisory layout classification"
    )

    @property
    def is_empty(self) -> bool:
        """True when no readable parameters were found."""
        return not self.values

    def to_dict(self) -> dict[str, Any]:
        """Serialize for telemetry and downstream consumers."""
        return self.model_dump(mode="json")
