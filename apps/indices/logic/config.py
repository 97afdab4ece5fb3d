"""Configuration helper for survey index thresholds.

Reads from Django settings.SURVEILLANCE_INDICES dict at call time so
that overrides made after import (tests, per-deployment tuning) apply.

Usage in Django settings:
    SURVEILLANCE_INDICES = {
        'HOUSE_INDEX_THRESHOLD': 5.0,
        'BRETEAU_INDEX_THRESHOLD': 20.0,
        'RODENT_INDEX_THRESHOLD': 10.0,
        'WATER_CONTAMINATION_THRESHOLD': 15.0,
        'MAX_REPORT_SURVEYS': 500,
    }
"""

from django.conf import settings

from .data_models import DEFAULT_THRESHOLDS, RiskThresholds


def get_config():
    """Get SURVEILLANCE_INDICES config dict from settings."""
    return getattr(settings, 'SURVEILLANCE_INDICES', {})


def get_thresholds() -> RiskThresholds:
    """Build RiskThresholds from settings, falling back to the defaults."""
    cfg = get_config()
    return RiskThresholds(
        house_index=float(cfg.get('HOUSE_INDEX_THRESHOLD', DEFAULT_THRESHOLDS.house_index)),
        breteau_index=float(cfg.get('BRETEAU_INDEX_THRESHOLD', DEFAULT_THRESHOLDS.breteau_index)),
        rodent_index=float(cfg.get('RODENT_INDEX_THRESHOLD', DEFAULT_THRESHOLDS.rodent_index)),
        water_contamination_rate=float(
            cfg.get('WATER_CONTAMINATION_THRESHOLD', DEFAULT_THRESHOLDS.water_contamination_rate)
        ),
    )


def get_max_report_surveys() -> int:
    """Upper bound on surveys accepted in one report request."""
    return int(get_config().get('MAX_REPORT_SURVEYS', 500))
