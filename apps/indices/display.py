"""Display formatting for computed indices and risk warnings.

Percent-type indices render with one decimal and a trailing ``%``;
the Breteau Index is a per-100-houses rate and renders as a bare number.
"""

from .logic.data_models import (
    DEFAULT_THRESHOLDS,
    RiskAssessment,
    RiskFlag,
    RiskThresholds,
    RodentBorneIndices,
    VectorBorneIndices,
)

INDEX_LABELS = {
    'house_index': 'House Index',
    'container_index': 'Container Index',
    'breteau_index': 'Breteau Index',
    'rodent_index': 'Rodent Index',
    'trap_success_rate': 'Trap Success Rate',
    'water_contamination_rate': 'Water Contamination Rate',
}

# Indices that are not percentages
BARE_RATE_FIELDS = frozenset({'breteau_index'})


def format_rate(value: float) -> str:
    return f"{value:.1f}"


def format_percentage(value: float) -> str:
    return f"{format_rate(value)}%"


def format_index(name: str, value: float) -> str:
    if name in BARE_RATE_FIELDS:
        return format_rate(value)
    return format_percentage(value)


def display_indices(indices: VectorBorneIndices | RodentBorneIndices) -> dict:
    """Map each index field to its display string."""
    return {name: format_index(name, value) for name, value in indices.to_dict().items()}


def _threshold_text(value: float) -> str:
    return f"{value:g}"


def risk_message(flag: RiskFlag, thresholds: RiskThresholds | None = None) -> str:
    """Warning banner text for a single flag."""
    t = thresholds or DEFAULT_THRESHOLDS
    if flag == RiskFlag.HOUSE_INDEX_HIGH_RISK:
        return f"High risk: House Index above {_threshold_text(t.house_index)}% threshold"
    if flag == RiskFlag.BRETEAU_INDEX_HIGH_RISK:
        return f"High risk: Breteau Index above {_threshold_text(t.breteau_index)} threshold"
    if flag == RiskFlag.RODENT_INDEX_HIGH_RISK:
        return f"High risk: Rodent Index above {_threshold_text(t.rodent_index)}% threshold"
    return (
        "High risk: Water contamination above "
        f"{_threshold_text(t.water_contamination_rate)}% threshold"
    )


def risk_warnings(assessment: RiskAssessment, thresholds: RiskThresholds | None = None) -> list[str]:
    return [risk_message(flag, thresholds) for flag in assessment.sorted_flags()]
