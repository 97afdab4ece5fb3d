"""Epidemiological index computation.

Turns raw field survey counts into ratio-based indices and classifies
them against risk thresholds:

    House Index        = positive houses / houses surveyed * 100
    Container Index    = positive containers / containers inspected * 100
    Breteau Index      = positive containers / houses surveyed * 100
    Rodent Index       = rodent sightings / areas inspected * 100
    Trap Success Rate  = rodents caught / traps set * 100
    Water Contamination Rate = contaminated samples / samples collected * 100

A zero denominator yields 0.0. Values are rounded to one decimal place,
half away from zero, using integer arithmetic so that the rounding never
depends on binary float representation.

Everything here is pure and free of Django imports so it can be called
on every keystroke and from any thread.
"""

import math
from dataclasses import fields

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


def percentage(numerator: int, denominator: int) -> float:
    """Return numerator/denominator * 100 rounded to one decimal place."""
    if denominator == 0:
        return 0.0
    # Work in tenths of a percent: numerator * 1000 / denominator.
    tenths, remainder = divmod(numerator * 1000, denominator)
    if remainder * 2 >= denominator:
        tenths += 1
    return tenths / 10


def validate_count(name: str, value) -> int:
    """Reject anything that is not an integer in [0, MAX_COUNT]."""
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidInput(name, value, "must be finite")
        raise InvalidInput(name, value, "must be an integer")
    if value < 0:
        raise InvalidInput(name, value, "must be non-negative")
    if value > MAX_COUNT:
        raise InvalidInput(name, value, "too large")
    return value


def _validate_counters(counters) -> None:
    for f in fields(counters):
        validate_count(f.name, getattr(counters, f.name))


def compute_vector_borne_indices(counters: VectorBorneCounters) -> VectorBorneIndices:
    """Compute House, Container and Breteau indices."""
    if not isinstance(counters, VectorBorneCounters):
        raise InvalidInput("counters", counters, "expected VectorBorneCounters")
    _validate_counters(counters)

    return VectorBorneIndices(
        house_index=percentage(counters.positive_houses, counters.houses_surveyed),
        container_index=percentage(counters.positive_containers, counters.containers_inspected),
        breteau_index=percentage(counters.positive_containers, counters.houses_surveyed),
    )


def compute_rodent_borne_indices(counters: RodentBorneCounters) -> RodentBorneIndices:
    """Compute Rodent Index, Trap Success Rate and Water Contamination Rate."""
    if not isinstance(counters, RodentBorneCounters):
        raise InvalidInput("counters", counters, "expected RodentBorneCounters")
    _validate_counters(counters)

    return RodentBorneIndices(
        rodent_index=percentage(counters.rodent_sightings, counters.areas_inspected),
        trap_success_rate=percentage(counters.rodents_caught, counters.traps_set),
        water_contamination_rate=percentage(
            counters.contaminated_samples, counters.water_samples_collected
        ),
    )


def compute_indices(counters):
    """Dispatch on the counters type."""
    if isinstance(counters, VectorBorneCounters):
        return compute_vector_borne_indices(counters)
    if isinstance(counters, RodentBorneCounters):
        return compute_rodent_borne_indices(counters)
    raise InvalidInput("counters", counters, "unsupported counters type")


def domain_for(record) -> Domain:
    """Domain of a counters or indices record."""
    domain = getattr(type(record), "domain", None)
    if not isinstance(domain, Domain):
        raise InvalidInput("record", record, "not a survey record")
    return domain


def parse_domain(domain) -> Domain:
    try:
        return Domain(domain)
    except ValueError:
        raise InvalidInput("domain", domain, f"must be one of {[d.value for d in Domain]}") from None


def assess_risk(
    indices,
    domain,
    thresholds: RiskThresholds | None = None,
) -> RiskAssessment:
    """Compare indices against thresholds. Boundary values are not high risk."""
    domain = parse_domain(domain)
    thresholds = thresholds or DEFAULT_THRESHOLDS
    flags = set()

    if domain == Domain.VECTOR:
        if not isinstance(indices, VectorBorneIndices):
            raise InvalidInput("indices", indices, "expected VectorBorneIndices")
        if indices.house_index > thresholds.house_index:
            flags.add(RiskFlag.HOUSE_INDEX_HIGH_RISK)
        if indices.breteau_index > thresholds.breteau_index:
            flags.add(RiskFlag.BRETEAU_INDEX_HIGH_RISK)
    else:
        if not isinstance(indices, RodentBorneIndices):
            raise InvalidInput("indices", indices, "expected RodentBorneIndices")
        if indices.rodent_index > thresholds.rodent_index:
            flags.add(RiskFlag.RODENT_INDEX_HIGH_RISK)
        if indices.water_contamination_rate > thresholds.water_contamination_rate:
            flags.add(RiskFlag.WATER_CONTAMINATION_HIGH_RISK)

    return RiskAssessment(domain=domain, flags=frozenset(flags))
