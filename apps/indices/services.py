"""
Survey Index Service.

Wraps the pure computation engine with configured thresholds, display
formatting and logging, and builds pooled batch reports. Nothing here
is persisted; every call works only on the records it is given.
"""

import csv
import logging
from dataclasses import dataclass, field
from io import StringIO
from typing import Any, Iterable, Mapping

from .display import INDEX_LABELS, display_indices, risk_warnings
from .logic import config as cfg
from .logic.data_models import (
    Domain,
    InvalidInput,
    RiskAssessment,
    RiskThresholds,
    RodentBorneCounters,
    VectorBorneCounters,
)
from .logic.engine import assess_risk, compute_indices, domain_for, parse_domain

logger = logging.getLogger(__name__)

COUNTER_CLASSES = {
    Domain.VECTOR: VectorBorneCounters,
    Domain.RODENT: RodentBorneCounters,
}

REPORT_METADATA_FIELDS = ('label', 'region', 'survey_date')


def counters_from_payload(domain, data: Mapping[str, Any]):
    """Build strict counters for a domain from a mapping (values are not coerced)."""
    return COUNTER_CLASSES[parse_domain(domain)].from_dict(data or {})


@dataclass(frozen=True)
class SurveyEvaluation:
    """Computed indices and risk assessment for one survey."""
    counters: Any
    indices: Any
    assessment: RiskAssessment
    display: dict
    warnings: list
    metadata: dict = field(default_factory=dict)

    @property
    def domain(self) -> Domain:
        return self.assessment.domain

    def to_dict(self) -> dict:
        result = {
            'domain': self.domain.value,
            'counters': self.counters.to_dict(),
            'indices': self.indices.to_dict(),
            'display': self.display,
            'risk': self.assessment.to_dict(),
            'warnings': self.warnings,
        }
        if self.metadata:
            result['metadata'] = self.metadata
        return result


@dataclass
class SurveyReport:
    """Per-survey evaluations plus one pooled evaluation per domain."""
    rows: list[SurveyEvaluation] = field(default_factory=list)
    pooled: dict = field(default_factory=dict)  # Domain -> SurveyEvaluation
    thresholds: RiskThresholds | None = None

    @property
    def high_risk_count(self) -> int:
        return sum(1 for row in self.rows if row.assessment.is_high_risk)

    def to_dict(self) -> dict:
        return {
            'survey_count': len(self.rows),
            'high_risk_count': self.high_risk_count,
            'surveys': [row.to_dict() for row in self.rows],
            'pooled': {domain.value: ev.to_dict() for domain, ev in self.pooled.items()},
            'thresholds': self.thresholds.to_dict() if self.thresholds else None,
        }

    def csv_rows(self):
        """Yield CSV text chunks: header, one line per survey, then pooled lines."""
        output = StringIO()
        writer = csv.writer(output)

        index_names = list(INDEX_LABELS)
        headers = ['Scope', 'Domain', 'Label', 'Region', 'Survey Date']
        headers.extend(INDEX_LABELS[name] for name in index_names)
        headers.extend(['High Risk', 'Warnings'])

        writer.writerow(headers)
        yield output.getvalue()
        output.seek(0)
        output.truncate(0)

        pooled_rows = [('Pooled', ev) for ev in self.pooled.values()]
        for scope, ev in [('Survey', row) for row in self.rows] + pooled_rows:
            indices = ev.indices.to_dict()
            row = [
                scope,
                Domain.display_name(ev.domain),
                ev.metadata.get('label', ''),
                ev.metadata.get('region', ''),
                ev.metadata.get('survey_date', ''),
            ]
            row.extend(ev.display[name] if name in indices else '' for name in index_names)
            row.extend([
                'Yes' if ev.assessment.is_high_risk else 'No',
                '; '.join(ev.warnings),
            ])
            writer.writerow(row)
            yield output.getvalue()
            output.seek(0)
            output.truncate(0)


class IndexCalculationService:
    """Service for survey index calculation."""

    def __init__(self, thresholds: RiskThresholds | None = None):
        self.thresholds = thresholds or cfg.get_thresholds()

    def evaluate(self, counters, metadata: dict | None = None) -> SurveyEvaluation:
        """Compute indices and risk flags for one counters record.

        Raises InvalidInput for negative, non-integer or non-finite counts.
        """
        indices = compute_indices(counters)
        domain = domain_for(counters)
        assessment = assess_risk(indices, domain, self.thresholds)

        logger.debug(f"Computed {domain.value} indices {indices.to_dict()} from {counters.to_dict()}")
        if assessment.is_high_risk:
            logger.info(
                f"High-risk {domain.value} survey: "
                f"{', '.join(f.value for f in assessment.sorted_flags())}"
            )

        return SurveyEvaluation(
            counters=counters,
            indices=indices,
            assessment=assessment,
            display=display_indices(indices),
            warnings=risk_warnings(assessment, self.thresholds),
            metadata=dict(metadata or {}),
        )

    def evaluate_payload(self, domain, data: Mapping[str, Any], metadata: dict | None = None) -> SurveyEvaluation:
        """Evaluate counters given as a plain mapping."""
        return self.evaluate(counters_from_payload(domain, data), metadata=metadata)

    def build_report(self, surveys: Iterable[Mapping[str, Any]]) -> SurveyReport:
        """Evaluate a batch of surveys and pool counters per domain.

        Each survey is a mapping with ``domain``, ``counters`` and optional
        ``label``, ``region`` and ``survey_date`` keys. Pooled indices are
        computed from summed counters, not averaged indices.
        """
        report = SurveyReport(thresholds=self.thresholds)
        totals: dict[Domain, dict[str, int]] = {}

        for position, survey in enumerate(surveys):
            domain = parse_domain(survey.get('domain'))
            metadata = {
                key: str(survey[key]) for key in REPORT_METADATA_FIELDS
                if survey.get(key) not in (None, '')
            }
            try:
                evaluation = self.evaluate_payload(domain, survey.get('counters') or {}, metadata)
            except InvalidInput as e:
                logger.warning(f"Rejected survey #{position} in report: {e}")
                raise

            report.rows.append(evaluation)
            domain_totals = totals.setdefault(domain, dict.fromkeys(COUNTER_CLASSES[domain].field_names(), 0))
            for name, value in evaluation.counters.to_dict().items():
                domain_totals[name] += value

        for domain in Domain:
            if domain in totals:
                report.pooled[domain] = self.evaluate(
                    COUNTER_CLASSES[domain](**totals[domain]),
                    metadata={'label': 'All surveys'},
                )

        logger.info(
            f"Built report: {len(report.rows)} surveys, "
            f"{report.high_risk_count} high risk"
        )
        return report
