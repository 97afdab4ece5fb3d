"""Data models for field survey index computation.

Survey counters come in two shapes, one per disease domain:
- Vector-borne (Aedes/Anopheles larval surveys): houses and containers
- Rodent-borne (leptospirosis): areas, traps and water samples

All records are frozen so a single instance can be shared between
concurrent requests without coordination.
"""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Mapping

# Upper bound for any single counter; keeps every index finite as a float.
MAX_COUNT = 10**15


class InvalidInput(ValueError):
    """A survey counter is negative, non-integer, non-finite or too large."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}={value!r}: {reason}")


class Domain(str, Enum):
    """Disease domain a survey belongs to."""
    VECTOR = "vector"
    RODENT = "rodent"

    @classmethod
    def display_name(cls, value):
        """Get human-readable display name for a domain."""
        display_map = {
            cls.VECTOR: "Vector-borne (Malaria/Dengue)",
            cls.RODENT: "Rodent-borne (Leptospirosis)",
        }
        try:
            return display_map[cls(value)]
        except ValueError:
            return str(value).replace("_", " ").title() if value else ""

    @classmethod
    def all_options(cls):
        """Get all options as (value, display_name) tuples for dropdowns."""
        return [(d.value, cls.display_name(d)) for d in cls]


class RiskFlag(str, Enum):
    """High-risk conditions raised by threshold comparison."""
    HOUSE_INDEX_HIGH_RISK = "house_index_high_risk"
    BRETEAU_INDEX_HIGH_RISK = "breteau_index_high_risk"
    RODENT_INDEX_HIGH_RISK = "rodent_index_high_risk"
    WATER_CONTAMINATION_HIGH_RISK = "water_contamination_high_risk"

    @property
    def domain(self) -> Domain:
        if self in (RiskFlag.HOUSE_INDEX_HIGH_RISK, RiskFlag.BRETEAU_INDEX_HIGH_RISK):
            return Domain.VECTOR
        return Domain.RODENT


class _CounterRecord:
    """Shared helpers for the counter dataclasses."""

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """Build counters from a mapping. Missing keys default to 0, unknown keys are ignored."""
        return cls(**{name: data.get(name, 0) for name in cls.field_names()})

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class VectorBorneCounters(_CounterRecord):
    """Larval survey counts for one locality."""
    houses_surveyed: int = 0
    positive_houses: int = 0
    containers_inspected: int = 0
    positive_containers: int = 0

    domain = Domain.VECTOR


@dataclass(frozen=True)
class RodentBorneCounters(_CounterRecord):
    """Rodent and water sampling counts for one locality."""
    areas_inspected: int = 0
    rodent_sightings: int = 0
    traps_set: int = 0
    rodents_caught: int = 0
    water_samples_collected: int = 0
    contaminated_samples: int = 0

    domain = Domain.RODENT


@dataclass(frozen=True)
class VectorBorneIndices:
    """Percentages, except breteau_index which is per 100 houses and uncapped."""
    house_index: float = 0.0
    container_index: float = 0.0
    breteau_index: float = 0.0

    domain = Domain.VECTOR

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RodentBorneIndices:
    rodent_index: float = 0.0
    trap_success_rate: float = 0.0
    water_contamination_rate: float = 0.0

    domain = Domain.RODENT

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RiskThresholds:
    """Index values above which a survey is high risk (strict greater-than)."""
    house_index: float = 5.0
    breteau_index: float = 20.0
    rodent_index: float = 10.0
    water_contamination_rate: float = 15.0

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_THRESHOLDS = RiskThresholds()


@dataclass(frozen=True)
class RiskAssessment:
    """Flags triggered for one set of indices. No flags means low risk."""
    domain: Domain
    flags: frozenset = frozenset()

    @property
    def is_high_risk(self) -> bool:
        return bool(self.flags)

    def has(self, flag: RiskFlag) -> bool:
        return flag in self.flags

    def sorted_flags(self) -> list[RiskFlag]:
        """Flags in declaration order, for stable output."""
        return [f for f in RiskFlag if f in self.flags]

    def to_dict(self) -> dict:
        return {
            "domain": self.domain.value,
            "high_risk": self.is_high_risk,
            "flags": [f.value for f in self.sorted_flags()],
        }
