"""Survey index computation logic.

Pure functions and data models with no Django dependency. The settings
adapter lives in ``config`` and is imported explicitly by callers that
run inside Django.
"""

from .data_models import (
    DEFAULT_THRESHOLDS,
    MAX_COUNT,
    Domain,
    InvalidInput,
    RiskAssessment,
    RiskFlag,
    RiskThresholds,
    RodentBorneCounters,
    RodentBorneIndices,
    VectorBorneCounters,
    VectorBorneIndices,
)
from .engine import (
    assess_risk,
    compute_indices,
    compute_rodent_borne_indices,
    compute_vector_borne_indices,
    domain_for,
    parse_domain,
    percentage,
)

__all__ = [
    # Data models
    'DEFAULT_THRESHOLDS',
    'MAX_COUNT',
    'Domain',
    'InvalidInput',
    'RiskAssessment',
    'RiskFlag',
    'RiskThresholds',
    'RodentBorneCounters',
    'RodentBorneIndices',
    'VectorBorneCounters',
    'VectorBorneIndices',
    # Engine
    'assess_risk',
    'compute_indices',
    'compute_rodent_borne_indices',
    'compute_vector_borne_indices',
    'domain_for',
    'parse_domain',
    'percentage',
]
