"""Tests for the survey indices module."""

import csv
import json
import math
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from .display import (
    display_indices,
    format_index,
    format_percentage,
    format_rate,
    risk_message,
    risk_warnings,
)
from .forms import (
    RodentSurveyForm,
    VectorSurveyForm,
    parse_count,
    survey_form_for,
)
from .logic import config as cfg
from .logic.data_models import (
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
from .logic.engine import (
    assess_risk,
    compute_indices,
    compute_rodent_borne_indices,
    compute_vector_borne_indices,
    domain_for,
    percentage,
)
from .services import IndexCalculationService, counters_from_payload


# ---------------------------------------------------------------------------
# Helper factory functions
# ---------------------------------------------------------------------------

def _vector(houses=0, pos_houses=0, containers=0, pos_containers=0):
    return VectorBorneCounters(
        houses_surveyed=houses,
        positive_houses=pos_houses,
        containers_inspected=containers,
        positive_containers=pos_containers,
    )


def _rodent(areas=0, sightings=0, traps=0, caught=0, samples=0, contaminated=0):
    return RodentBorneCounters(
        areas_inspected=areas,
        rodent_sightings=sightings,
        traps_set=traps,
        rodents_caught=caught,
        water_samples_collected=samples,
        contaminated_samples=contaminated,
    )


# ===========================================================================
# Engine tests
# ===========================================================================

class PercentageTests(SimpleTestCase):
    """Test the rounding primitive."""

    def test_zero_denominator_is_zero(self):
        self.assertEqual(percentage(0, 0), 0.0)
        self.assertEqual(percentage(17, 0), 0.0)

    def test_exact_values(self):
        self.assertEqual(percentage(33, 100), 33.0)
        self.assertEqual(percentage(1, 8), 12.5)

    def test_repeating_fractions(self):
        self.assertEqual(percentage(1, 3), 33.3)
        self.assertEqual(percentage(2, 3), 66.7)
        self.assertEqual(percentage(1, 6), 16.7)

    def test_half_rounds_away_from_zero(self):
        # 6.25 and 0.25 are exact ties at one decimal place
        self.assertEqual(percentage(1, 16), 6.3)
        self.assertEqual(percentage(1, 400), 0.3)
        self.assertEqual(percentage(1, 800), 0.1)

    def test_large_counts_do_not_lose_precision(self):
        self.assertEqual(percentage(10**20, 3 * 10**20), 33.3)


class VectorBorneIndicesTests(SimpleTestCase):
    """Test House, Container and Breteau index computation."""

    def test_reference_survey(self):
        indices = compute_vector_borne_indices(_vector(100, 33, 50, 10))
        self.assertEqual(indices.house_index, 33.0)
        self.assertEqual(indices.container_index, 20.0)
        self.assertEqual(indices.breteau_index, 10.0)

    def test_boundary_survey(self):
        indices = compute_vector_borne_indices(_vector(200, 10, 400, 80))
        self.assertEqual(indices.house_index, 5.0)
        self.assertEqual(indices.container_index, 20.0)
        self.assertEqual(indices.breteau_index, 40.0)

    def test_all_zero_input(self):
        indices = compute_vector_borne_indices(_vector())
        self.assertEqual(indices, VectorBorneIndices(0.0, 0.0, 0.0))

    def test_zero_houses_zeroes_house_and_breteau(self):
        indices = compute_vector_borne_indices(_vector(0, 0, 20, 5))
        self.assertEqual(indices.house_index, 0.0)
        self.assertEqual(indices.breteau_index, 0.0)
        self.assertEqual(indices.container_index, 25.0)

    def test_zero_containers_zeroes_container_index(self):
        indices = compute_vector_borne_indices(_vector(10, 2, 0, 0))
        self.assertEqual(indices.container_index, 0.0)
        self.assertEqual(indices.house_index, 20.0)

    def test_breteau_is_not_capped(self):
        indices = compute_vector_borne_indices(_vector(10, 5, 100, 35))
        self.assertEqual(indices.breteau_index, 350.0)

    def test_no_cross_field_validation(self):
        indices = compute_vector_borne_indices(_vector(10, 12, 0, 0))
        self.assertEqual(indices.house_index, 120.0)

    def test_results_are_floats(self):
        indices = compute_vector_borne_indices(_vector(100, 33, 50, 10))
        for value in indices.to_dict().values():
            self.assertIsInstance(value, float)
            self.assertTrue(math.isfinite(value))

    def test_repeat_calls_are_identical(self):
        counters = _vector(37, 11, 93, 29)
        first = compute_vector_borne_indices(counters)
        second = compute_vector_borne_indices(counters)
        self.assertEqual(first, second)
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_percent_indices_stay_in_range(self):
        for houses in range(1, 30):
            for positive in range(0, houses + 1):
                indices = compute_vector_borne_indices(_vector(houses, positive, houses, positive))
                self.assertGreaterEqual(indices.house_index, 0.0)
                self.assertLessEqual(indices.house_index, 100.0)
                self.assertLessEqual(indices.container_index, 100.0)


class RodentBorneIndicesTests(SimpleTestCase):
    """Test Rodent Index, Trap Success Rate and Water Contamination Rate."""

    def test_all_zero_input(self):
        indices = compute_rodent_borne_indices(_rodent())
        self.assertEqual(indices.to_dict(), {
            'rodent_index': 0.0,
            'trap_success_rate': 0.0,
            'water_contamination_rate': 0.0,
        })
        self.assertFalse(assess_risk(indices, 'rodent').is_high_risk)

    def test_known_survey(self):
        indices = compute_rodent_borne_indices(_rodent(50, 6, 40, 3, 20, 3))
        self.assertEqual(indices.rodent_index, 12.0)
        self.assertEqual(indices.trap_success_rate, 7.5)
        self.assertEqual(indices.water_contamination_rate, 15.0)

    def test_each_denominator_zero_independently(self):
        indices = compute_rodent_borne_indices(_rodent(0, 4, 10, 1, 0, 2))
        self.assertEqual(indices.rodent_index, 0.0)
        self.assertEqual(indices.trap_success_rate, 10.0)
        self.assertEqual(indices.water_contamination_rate, 0.0)

    def test_percent_indices_stay_in_range(self):
        for total in range(1, 30):
            for positive in range(0, total + 1):
                indices = compute_rodent_borne_indices(
                    _rodent(total, positive, total, positive, total, positive)
                )
                for value in indices.to_dict().values():
                    self.assertGreaterEqual(value, 0.0)
                    self.assertLessEqual(value, 100.0)

    def test_largest_counts_stay_finite(self):
        indices = compute_rodent_borne_indices(_rodent(1, MAX_COUNT, 1, MAX_COUNT, 1, MAX_COUNT))
        for value in indices.to_dict().values():
            self.assertTrue(math.isfinite(value))
        self.assertEqual(indices.rodent_index, float(MAX_COUNT * 100))


class InvalidInputTests(SimpleTestCase):
    """Test rejection of counters that are not non-negative integers."""

    def test_negative_count(self):
        with self.assertRaises(InvalidInput) as ctx:
            compute_vector_borne_indices(_vector(10, -1, 0, 0))
        self.assertEqual(ctx.exception.field, 'positive_houses')
        self.assertEqual(ctx.exception.value, -1)
        self.assertEqual(ctx.exception.reason, 'must be non-negative')

    def test_fractional_count(self):
        with self.assertRaises(InvalidInput) as ctx:
            compute_rodent_borne_indices(_rodent(traps=2.5))
        self.assertEqual(ctx.exception.field, 'traps_set')
        self.assertEqual(ctx.exception.reason, 'must be an integer')

    def test_non_finite_count(self):
        for value in (float('nan'), float('inf')):
            with self.assertRaises(InvalidInput) as ctx:
                compute_vector_borne_indices(_vector(houses=value))
            self.assertEqual(ctx.exception.reason, 'must be finite')

    def test_bool_and_string_rejected(self):
        with self.assertRaises(InvalidInput):
            compute_vector_borne_indices(_vector(houses=True))
        with self.assertRaises(InvalidInput):
            compute_vector_borne_indices(_vector(houses='10'))

    def test_count_above_limit(self):
        for value in (MAX_COUNT + 1, 10**320):
            with self.assertRaises(InvalidInput) as ctx:
                compute_vector_borne_indices(_vector(houses=1, pos_containers=value))
            self.assertEqual(ctx.exception.field, 'positive_containers')
            self.assertEqual(ctx.exception.reason, 'too large')

    def test_invalid_input_is_value_error(self):
        self.assertTrue(issubclass(InvalidInput, ValueError))

    def test_wrong_counters_type(self):
        with self.assertRaises(InvalidInput):
            compute_vector_borne_indices(_rodent())
        with self.assertRaises(InvalidInput):
            compute_rodent_borne_indices(_vector())
        with self.assertRaises(InvalidInput):
            compute_indices({'houses_surveyed': 1})


class DispatchTests(SimpleTestCase):

    def test_compute_indices_dispatches_on_type(self):
        self.assertIsInstance(compute_indices(_vector(1, 1, 1, 1)), VectorBorneIndices)
        self.assertIsInstance(compute_indices(_rodent()), RodentBorneIndices)

    def test_domain_for(self):
        self.assertEqual(domain_for(_vector()), Domain.VECTOR)
        self.assertEqual(domain_for(RodentBorneIndices()), Domain.RODENT)
        with self.assertRaises(InvalidInput):
            domain_for(object())


class AssessRiskTests(SimpleTestCase):
    """Test threshold classification."""

    def test_house_index_boundary_not_flagged(self):
        assessment = assess_risk(VectorBorneIndices(house_index=5.0), Domain.VECTOR)
        self.assertFalse(assessment.has(RiskFlag.HOUSE_INDEX_HIGH_RISK))
        self.assertFalse(assessment.is_high_risk)

    def test_house_index_above_boundary_flagged(self):
        assessment = assess_risk(VectorBorneIndices(house_index=5.1), 'vector')
        self.assertTrue(assessment.has(RiskFlag.HOUSE_INDEX_HIGH_RISK))

    def test_breteau_boundary(self):
        self.assertFalse(assess_risk(VectorBorneIndices(breteau_index=20.0), 'vector').is_high_risk)
        self.assertTrue(
            assess_risk(VectorBorneIndices(breteau_index=20.1), 'vector')
            .has(RiskFlag.BRETEAU_INDEX_HIGH_RISK)
        )

    def test_rodent_boundaries(self):
        at_boundary = RodentBorneIndices(rodent_index=10.0, water_contamination_rate=15.0)
        self.assertEqual(assess_risk(at_boundary, 'rodent').flags, frozenset())

        above = RodentBorneIndices(rodent_index=10.1, water_contamination_rate=15.1)
        self.assertEqual(
            assess_risk(above, 'rodent').flags,
            frozenset({RiskFlag.RODENT_INDEX_HIGH_RISK, RiskFlag.WATER_CONTAMINATION_HIGH_RISK}),
        )

    def test_trap_success_rate_has_no_threshold(self):
        indices = RodentBorneIndices(trap_success_rate=100.0)
        self.assertFalse(assess_risk(indices, 'rodent').is_high_risk)

    def test_known_scenario_flags_only_breteau(self):
        indices = compute_vector_borne_indices(_vector(200, 10, 400, 80))
        assessment = assess_risk(indices, 'vector')
        self.assertEqual(assessment.sorted_flags(), [RiskFlag.BRETEAU_INDEX_HIGH_RISK])

    def test_multiple_flags(self):
        indices = compute_vector_borne_indices(_vector(10, 5, 100, 35))
        assessment = assess_risk(indices, 'vector')
        self.assertEqual(
            assessment.sorted_flags(),
            [RiskFlag.HOUSE_INDEX_HIGH_RISK, RiskFlag.BRETEAU_INDEX_HIGH_RISK],
        )

    def test_rounded_value_is_compared(self):
        # 504 / 10000 = 5.04% rounds to 5.0 and sits on the boundary
        indices = compute_vector_borne_indices(_vector(10000, 504, 0, 0))
        self.assertEqual(indices.house_index, 5.0)
        self.assertFalse(assess_risk(indices, 'vector').is_high_risk)

    def test_custom_thresholds(self):
        thresholds = RiskThresholds(house_index=3.0)
        indices = VectorBorneIndices(house_index=4.0)
        self.assertFalse(assess_risk(indices, 'vector').is_high_risk)
        self.assertTrue(assess_risk(indices, 'vector', thresholds).is_high_risk)

    def test_unknown_domain(self):
        with self.assertRaises(InvalidInput) as ctx:
            assess_risk(VectorBorneIndices(), 'malaria')
        self.assertEqual(ctx.exception.field, 'domain')

    def test_domain_mismatch(self):
        with self.assertRaises(InvalidInput):
            assess_risk(VectorBorneIndices(), 'rodent')
        with self.assertRaises(InvalidInput):
            assess_risk(RodentBorneIndices(), Domain.VECTOR)

    def test_to_dict(self):
        assessment = RiskAssessment(
            domain=Domain.VECTOR,
            flags=frozenset({RiskFlag.BRETEAU_INDEX_HIGH_RISK, RiskFlag.HOUSE_INDEX_HIGH_RISK}),
        )
        self.assertEqual(assessment.to_dict(), {
            'domain': 'vector',
            'high_risk': True,
            'flags': ['house_index_high_risk', 'breteau_index_high_risk'],
        })


# ===========================================================================
# Data model tests
# ===========================================================================

class DataModelTests(SimpleTestCase):

    def test_from_dict_defaults_and_ignores_unknown(self):
        counters = VectorBorneCounters.from_dict({'houses_surveyed': 4, 'region': 'North'})
        self.assertEqual(counters, VectorBorneCounters(houses_surveyed=4))

    def test_field_names(self):
        self.assertEqual(
            RodentBorneCounters.field_names(),
            ['areas_inspected', 'rodent_sightings', 'traps_set', 'rodents_caught',
             'water_samples_collected', 'contaminated_samples'],
        )

    def test_domain_display_name(self):
        self.assertEqual(Domain.display_name('rodent'), 'Rodent-borne (Leptospirosis)')
        self.assertEqual(Domain.display_name('other_thing'), 'Other Thing')
        self.assertEqual(len(Domain.all_options()), 2)

    def test_flag_domain(self):
        self.assertEqual(RiskFlag.BRETEAU_INDEX_HIGH_RISK.domain, Domain.VECTOR)
        self.assertEqual(RiskFlag.WATER_CONTAMINATION_HIGH_RISK.domain, Domain.RODENT)


# ===========================================================================
# Config tests
# ===========================================================================

class ConfigTests(SimpleTestCase):

    def test_defaults_from_settings(self):
        self.assertEqual(cfg.get_thresholds(), DEFAULT_THRESHOLDS)
        self.assertEqual(cfg.get_max_report_surveys(), 500)

    @override_settings(SURVEILLANCE_INDICES={'HOUSE_INDEX_THRESHOLD': '3'})
    def test_partial_override(self):
        thresholds = cfg.get_thresholds()
        self.assertEqual(thresholds.house_index, 3.0)
        self.assertEqual(thresholds.breteau_index, 20.0)

    @override_settings()
    def test_missing_settings_dict(self):
        from django.conf import settings
        del settings.SURVEILLANCE_INDICES
        self.assertEqual(cfg.get_thresholds(), DEFAULT_THRESHOLDS)


# ===========================================================================
# Form parsing tests
# ===========================================================================

class ParseCountTests(SimpleTestCase):
    """Test lenient free-text parsing."""

    def test_plain_numbers(self):
        self.assertEqual(parse_count('42'), 42)
        self.assertEqual(parse_count('  7 '), 7)
        self.assertEqual(parse_count('+4'), 4)

    def test_leading_digits(self):
        self.assertEqual(parse_count('12abc'), 12)
        self.assertEqual(parse_count('3.9'), 3)

    def test_unparseable_is_zero(self):
        for text in ('', '   ', 'abc', '-', None):
            self.assertEqual(parse_count(text), 0)

    def test_negative_clamps_to_zero(self):
        self.assertEqual(parse_count('-3'), 0)
        self.assertEqual(parse_count(-2), 0)

    def test_huge_values_saturate(self):
        self.assertEqual(parse_count('9' * 5000), MAX_COUNT)
        self.assertEqual(parse_count('1' + '0' * 20), MAX_COUNT)
        self.assertEqual(parse_count(str(MAX_COUNT)), MAX_COUNT)
        self.assertEqual(parse_count('0' * 30 + '12'), 12)
        self.assertEqual(parse_count('-' + '9' * 5000), 0)
        self.assertEqual(parse_count(10**320), MAX_COUNT)
        self.assertEqual(parse_count(1e300), MAX_COUNT)

    def test_numbers(self):
        self.assertEqual(parse_count(5), 5)
        self.assertEqual(parse_count(5.7), 5)
        self.assertEqual(parse_count(float('nan')), 0)
        self.assertEqual(parse_count(float('-inf')), 0)
        self.assertEqual(parse_count(True), 0)


class SurveyFormTests(SimpleTestCase):

    def test_vector_form_builds_counters(self):
        form = VectorSurveyForm(data={
            'houses_surveyed': '100',
            'positive_houses': '33',
            'containers_inspected': '50 ',
            'positive_containers': '10',
        })
        self.assertTrue(form.is_valid())
        self.assertEqual(form.counters(), _vector(100, 33, 50, 10))

    def test_bad_text_never_invalidates_form(self):
        form = RodentSurveyForm(data={'areas_inspected': 'lots', 'traps_set': '-4'})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.counters(), _rodent())

    def test_unbound_form_gives_zero_counters(self):
        self.assertEqual(VectorSurveyForm().counters(), _vector())

    def test_survey_form_for(self):
        self.assertIsInstance(survey_form_for('vector'), VectorSurveyForm)
        self.assertIsInstance(survey_form_for(Domain.RODENT, {}), RodentSurveyForm)
        with self.assertRaises(ValueError):
            survey_form_for('dengue')


# ===========================================================================
# Display tests
# ===========================================================================

class DisplayTests(SimpleTestCase):

    def test_formatting(self):
        self.assertEqual(format_percentage(33.0), '33.0%')
        self.assertEqual(format_rate(40.0), '40.0')
        self.assertEqual(format_index('breteau_index', 350.0), '350.0')
        self.assertEqual(format_index('house_index', 0.0), '0.0%')

    def test_display_indices(self):
        display = display_indices(VectorBorneIndices(33.0, 20.0, 10.0))
        self.assertEqual(display, {
            'house_index': '33.0%',
            'container_index': '20.0%',
            'breteau_index': '10.0',
        })

    def test_risk_messages(self):
        self.assertEqual(
            risk_message(RiskFlag.HOUSE_INDEX_HIGH_RISK),
            'High risk: House Index above 5% threshold',
        )
        self.assertEqual(
            risk_message(RiskFlag.BRETEAU_INDEX_HIGH_RISK),
            'High risk: Breteau Index above 20 threshold',
        )
        self.assertEqual(
            risk_message(RiskFlag.RODENT_INDEX_HIGH_RISK),
            'High risk: Rodent Index above 10% threshold',
        )
        self.assertEqual(
            risk_message(RiskFlag.WATER_CONTAMINATION_HIGH_RISK),
            'High risk: Water contamination above 15% threshold',
        )

    def test_risk_message_uses_thresholds(self):
        message = risk_message(RiskFlag.HOUSE_INDEX_HIGH_RISK, RiskThresholds(house_index=2.5))
        self.assertEqual(message, 'High risk: House Index above 2.5% threshold')

    def test_no_warnings_for_low_risk(self):
        self.assertEqual(risk_warnings(RiskAssessment(domain=Domain.RODENT)), [])


# ===========================================================================
# Service tests
# ===========================================================================

class IndexCalculationServiceTests(SimpleTestCase):

    def test_evaluate(self):
        evaluation = IndexCalculationService().evaluate(_vector(200, 10, 400, 80))
        self.assertEqual(evaluation.domain, Domain.VECTOR)
        self.assertEqual(evaluation.display['breteau_index'], '40.0')
        self.assertEqual(evaluation.warnings, ['High risk: Breteau Index above 20 threshold'])

        data = evaluation.to_dict()
        self.assertEqual(data['indices']['house_index'], 5.0)
        self.assertEqual(data['risk']['flags'], ['breteau_index_high_risk'])
        self.assertNotIn('metadata', data)

    @override_settings(SURVEILLANCE_INDICES={'HOUSE_INDEX_THRESHOLD': 3.0})
    def test_uses_configured_thresholds(self):
        evaluation = IndexCalculationService().evaluate(_vector(100, 4, 0, 0))
        self.assertEqual(evaluation.warnings, ['High risk: House Index above 3% threshold'])

    def test_evaluate_payload_is_strict(self):
        with self.assertRaises(InvalidInput):
            IndexCalculationService().evaluate_payload('vector', {'houses_surveyed': -5})

    def test_counters_from_payload(self):
        counters = counters_from_payload('rodent', {'traps_set': 9})
        self.assertEqual(counters, _rodent(traps=9))
        with self.assertRaises(InvalidInput):
            counters_from_payload('plague', {})


class SurveyReportTests(SimpleTestCase):

    def setUp(self):
        self.surveys = [
            {'domain': 'vector', 'label': 'Ward 1', 'region': 'East',
             'counters': {'houses_surveyed': 100, 'positive_houses': 33,
                          'containers_inspected': 50, 'positive_containers': 10}},
            {'domain': 'vector', 'label': 'Ward 2',
             'counters': {'houses_surveyed': 200, 'positive_houses': 10,
                          'containers_inspected': 400, 'positive_containers': 80}},
            {'domain': 'rodent', 'survey_date': '2024-01-14',
             'counters': {'areas_inspected': 50, 'rodent_sightings': 4, 'traps_set': 40,
                          'rodents_caught': 3, 'water_samples_collected': 20,
                          'contaminated_samples': 3}},
        ]

    def test_pooled_indices_use_summed_counters(self):
        report = IndexCalculationService().build_report(self.surveys)
        pooled = report.pooled[Domain.VECTOR]
        self.assertEqual(pooled.counters, _vector(300, 43, 450, 90))
        self.assertEqual(pooled.indices, VectorBorneIndices(14.3, 20.0, 30.0))
        self.assertEqual(report.pooled[Domain.RODENT].indices.rodent_index, 8.0)

    def test_report_counts(self):
        report = IndexCalculationService().build_report(self.surveys)
        data = report.to_dict()
        self.assertEqual(data['survey_count'], 3)
        self.assertEqual(data['high_risk_count'], 2)
        self.assertEqual(data['surveys'][0]['metadata'], {'label': 'Ward 1', 'region': 'East'})
        self.assertEqual(data['thresholds'], DEFAULT_THRESHOLDS.to_dict())
        self.assertEqual(set(data['pooled']), {'vector', 'rodent'})

    def test_pooled_only_for_present_domains(self):
        report = IndexCalculationService().build_report(self.surveys[:1])
        self.assertEqual(list(report.pooled), [Domain.VECTOR])

    def test_empty_report(self):
        report = IndexCalculationService().build_report([])
        self.assertEqual(report.to_dict()['survey_count'], 0)
        self.assertEqual(report.pooled, {})

    def test_invalid_survey_propagates(self):
        surveys = self.surveys + [{'domain': 'rodent', 'counters': {'traps_set': -1}}]
        with self.assertRaises(InvalidInput):
            IndexCalculationService().build_report(surveys)

    def test_csv_rows(self):
        report = IndexCalculationService().build_report(self.surveys)
        rows = list(csv.reader(StringIO(''.join(report.csv_rows()))))

        self.assertEqual(rows[0][:5], ['Scope', 'Domain', 'Label', 'Region', 'Survey Date'])
        self.assertIn('Breteau Index', rows[0])
        self.assertEqual(len(rows), 1 + 3 + 2)

        header = rows[0]
        ward1 = dict(zip(header, rows[1]))
        self.assertEqual(ward1['Scope'], 'Survey')
        self.assertEqual(ward1['House Index'], '33.0%')
        self.assertEqual(ward1['Breteau Index'], '10.0')
        self.assertEqual(ward1['Rodent Index'], '')
        self.assertEqual(ward1['High Risk'], 'Yes')

        rodent = dict(zip(header, rows[3]))
        self.assertEqual(rodent['Survey Date'], '2024-01-14')
        self.assertEqual(rodent['High Risk'], 'No')
        self.assertEqual(rodent['Warnings'], '')

        self.assertEqual([r[0] for r in rows[4:]], ['Pooled', 'Pooled'])
        self.assertEqual(dict(zip(header, rows[4]))['Label'], 'All surveys')


# ===========================================================================
# View tests
# ===========================================================================

class LiveIndicesViewTests(TestCase):
    """Test the lenient live calculator endpoint."""

    def test_vector_live(self):
        response = self.client.get(reverse('indices:live', args=['vector']), {
            'houses_surveyed': '100',
            'positive_houses': '33',
            'containers_inspected': '50',
            'positive_containers': '10',
        })
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['evaluation']['indices'], {
            'house_index': 33.0, 'container_index': 20.0, 'breteau_index': 10.0,
        })
        self.assertEqual(data['evaluation']['display']['house_index'], '33.0%')
        self.assertEqual(data['evaluation']['warnings'], ['High risk: House Index above 5% threshold'])

    def test_bad_text_reads_as_zero(self):
        response = self.client.get(
            reverse('indices:live', args=['rodent']),
            {'areas_inspected': 'abc', 'rodent_sightings': '-5'},
        )
        self.assertEqual(response.status_code, 200)
        evaluation = response.json()['evaluation']
        self.assertEqual(evaluation['counters']['rodent_sightings'], 0)
        self.assertEqual(evaluation['risk']['flags'], [])

    def test_no_parameters(self):
        response = self.client.get(reverse('indices:live', args=['vector']))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['evaluation']['indices']['house_index'], 0.0)

    def test_huge_text_saturates(self):
        response = self.client.get(reverse('indices:live', args=['vector']), {
            'houses_surveyed': '1',
            'positive_containers': '1' + '0' * 5000,
        })
        self.assertEqual(response.status_code, 200)
        evaluation = response.json()['evaluation']
        self.assertEqual(evaluation['counters']['positive_containers'], MAX_COUNT)
        self.assertEqual(evaluation['indices']['breteau_index'], float(MAX_COUNT * 100))

    def test_unknown_domain_404(self):
        response = self.client.get(reverse('indices:live', args=['cholera']))
        self.assertEqual(response.status_code, 404)

    def test_post_not_allowed(self):
        response = self.client.post(reverse('indices:live', args=['vector']))
        self.assertEqual(response.status_code, 405)


# ===========================================================================
# Management command tests
# ===========================================================================

class ComputeIndicesCommandTests(SimpleTestCase):

    def test_vector_summary(self):
        out = StringIO()
        call_command(
            'compute_indices', 'vector',
            houses_surveyed='200', positive_houses='10',
            containers_inspected='400', positive_containers='80',
            stdout=out,
        )
        output = out.getvalue()
        self.assertIn('House Index', output)
        self.assertIn('5.0%', output)
        self.assertIn('40.0', output)
        self.assertIn('High risk: Breteau Index above 20 threshold', output)

    def test_rodent_low_risk(self):
        out = StringIO()
        call_command('compute_indices', 'rodent', areas_inspected='50', rodent_sightings='4', stdout=out)
        self.assertIn('No high-risk indicators', out.getvalue())

    def test_json_output_with_free_text(self):
        out = StringIO()
        call_command(
            'compute_indices', 'vector',
            houses_surveyed='100 houses', positive_houses='-3', json=True,
            stdout=out,
        )
        data = json.loads(out.getvalue())
        self.assertEqual(data['counters']['houses_surveyed'], 100)
        self.assertEqual(data['counters']['positive_houses'], 0)
        self.assertEqual(data['risk']['high_risk'], False)

    def test_unknown_domain(self):
        with self.assertRaises(CommandError):
            call_command('compute_indices', 'typhus', stdout=StringIO())
