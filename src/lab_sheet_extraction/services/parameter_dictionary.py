"""Synonym dictionary mapping canonical parameter names to label variants."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType

from lab_sheet_extraction.utils.exceptions import ConfigurationError

DEFAULT_PARAMETER_VARIANTS: dict[str, tuple[str, ...]] = {
    "pH": ("ph", "p.h", "acidity", "ph level", "ph value", "hydrogen", "h+"),
    "nitrogen": (
        "nitrogen",
        "n",
        "n%",
        "total nitrogen",
        "total n",
        "n content",
        "nitrate",
        "ammonia",
    ),
    "phosphorus": (
        "phosphorus",
        "p",
        "p2o5",
        "available phosphorus",
        "phosphate",
        "p content",
        "soluble p",
    ),
    "potassium": (
        "potassium",
        "k",
        "k2o",
        "available potassium",
        "potash",
        "k content",
        "exchangeable k",
    ),
    "calcium": (
        "calcium",
        "ca",
        "cao",
        "available calcium",
        "ca content",
        "exchangeable ca",
    ),
    "magnesium": (
        "magnesium",
        "mg",
        "mgo",
        "available magnesium",
        "mg content",
        "exchangeable mg",
    ),
    "sulfur": (
        "sulfur",
        "s",
        "sulphur",
        "available sulfur",
        "s content",
        "sulfate",
        "so4",
    ),
    "iron": ("iron", "fe", "available iron", "fe content", "ferrous", "ferric"),
    "manganese": ("manganese", "mn", "available manganese", "mn content"),
    "zinc": ("zinc", "zn", "available zinc", "zn content"),
    "copper": ("copper", "cu", "available copper", "cu content"),
    "boron": ("boron", "b", "available boron", "b content", "boric acid"),
    "organicMatter": ("organic matter", "om", "organic carbon", "oc", "humus"),
    "electricalConductivity": (
        "electrical conductivity",
        "ec",
        "conductivity",
        "salinity",
    ),
    "cationExchangeCapacity": (
        "cation exchange capacity",
        "cec",
        "exchange capacity",
    ),
}


class ParameterDictionary(Mapping[str, tuple[str, ...]]):
    """Immutable, ordered mapping of canonical name to lowercase variants.

    Iteration follows insertion order so that label matching, which stops at
    the first parameter with a matching variant, is reproducible.
    """

    def __init__(self, variants: Mapping[str, Sequence[str]]) -> None:
        entries: dict[str, tuple[str, ...]] = {}
        for name, names in variants.items():
            cleaned = tuple(v.strip().lower() for v in names if v.strip())
            if not cleaned:
                raise ConfigurationError(
                    f"Parameter '{name}' has no variants",
                    setting="parameter_variants",
                )
            entries[name] = cleaned
        self._entries = MappingProxyType(entries)

    def __getitem__(self, name: str) -> tuple[str, ...]:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ParameterDictionary({list(self._entries)})"

    def subset(self, names: Sequence[str]) -> ParameterDictionary:
        """Return a dictionary restricted to ``names``, in the given order."""
        return ParameterDictionary({name: self._entries[name] for name in names})


DEFAULT_DICTIONARY = ParameterDictionary(DEFAULT_PARAMETER_VARIANTS)
