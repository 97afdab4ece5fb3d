"""
DRF throttling classes for the survey indices API.

Requests are unauthenticated (identity lives in the hosted backend), so
rates are keyed by client IP. Calculation is cheap and called per
keystroke; report generation gets a lower rate.
"""

from rest_framework.throttling import AnonRateThrottle


class CalculateRateThrottle(AnonRateThrottle):
    scope = 'calculate'


class ReportRateThrottle(AnonRateThrottle):
    scope = 'report'
