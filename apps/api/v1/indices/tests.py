"""Tests for the Survey Indices API views."""

import csv
from io import StringIO

from django.core.cache import cache
from django.test import TestCase, override_settings
from rest_framework.test import APIClient


class IndicesAPITestBase(TestCase):
    """Base class with client setup and payload helpers."""

    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def vector_payload(self, **overrides):
        data = {
            'houses_surveyed': 100,
            'positive_houses': 33,
            'containers_inspected': 50,
            'positive_containers': 10,
        }
        data.update(overrides)
        return data

    def report_payload(self):
        return {
            'surveys': [
                {'domain': 'vector', 'label': 'East Region', 'survey_date': '2024-01-15',
                 'counters': self.vector_payload()},
                {'domain': 'vector', 'label': 'Central Region',
                 'counters': self.vector_payload(
                     houses_surveyed=200, positive_houses=10,
                     containers_inspected=400, positive_containers=80,
                 )},
                {'domain': 'rodent', 'label': 'North Region',
                 'counters': {'areas_inspected': 50, 'rodent_sightings': 6}},
            ],
        }


class VectorIndicesAPITests(IndicesAPITestBase):

    def test_reference_survey(self):
        response = self.client.post('/api/v1/indices/vector/', self.vector_payload(), format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['indices'], {
            'house_index': 33.0, 'container_index': 20.0, 'breteau_index': 10.0,
        })
        self.assertEqual(response.data['risk']['flags'], ['house_index_high_risk'])
        self.assertEqual(response.data['display']['breteau_index'], '10.0')

    def test_boundary_scenario(self):
        payload = self.vector_payload(
            houses_surveyed=200, positive_houses=10,
            containers_inspected=400, positive_containers=80,
        )
        response = self.client.post('/api/v1/indices/vector/', payload, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['indices']['house_index'], 5.0)
        self.assertEqual(response.data['risk']['flags'], ['breteau_index_high_risk'])

    def test_missing_fields_default_to_zero(self):
        response = self.client.post('/api/v1/indices/vector/', {}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['counters']['houses_surveyed'], 0)
        self.assertEqual(response.data['indices']['breteau_index'], 0.0)
        self.assertFalse(response.data['risk']['high_risk'])

    def test_negative_count_rejected(self):
        response = self.client.post(
            '/api/v1/indices/vector/', self.vector_payload(positive_houses=-1), format='json',
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('positive_houses', response.data)

    def test_non_integer_rejected(self):
        for value in ('abc', 2.5, None):
            response = self.client.post(
                '/api/v1/indices/vector/', self.vector_payload(houses_surveyed=value), format='json',
            )
            self.assertEqual(response.status_code, 400, value)
            self.assertIn('houses_surveyed', response.data)

    def test_oversized_count_rejected(self):
        for value in (10**15 + 1, 10**320):
            response = self.client.post(
                '/api/v1/indices/vector/',
                self.vector_payload(houses_surveyed=1, positive_containers=value),
                format='json',
            )
            self.assertEqual(response.status_code, 400)
            self.assertIn('positive_containers', response.data)

    def test_largest_count_accepted(self):
        response = self.client.post(
            '/api/v1/indices/vector/',
            self.vector_payload(houses_surveyed=1, positive_containers=10**15),
            format='json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['indices']['breteau_index'], 1e17)

    def test_get_not_allowed(self):
        response = self.client.get('/api/v1/indices/vector/')
        self.assertEqual(response.status_code, 405)


class RodentIndicesAPITests(IndicesAPITestBase):

    def test_all_zero(self):
        payload = {
            'areas_inspected': 0, 'rodent_sightings': 0, 'traps_set': 0,
            'rodents_caught': 0, 'water_samples_collected': 0, 'contaminated_samples': 0,
        }
        response = self.client.post('/api/v1/indices/rodent/', payload, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['indices'], {
            'rodent_index': 0.0, 'trap_success_rate': 0.0, 'water_contamination_rate': 0.0,
        })
        self.assertEqual(response.data['risk']['flags'], [])
        self.assertEqual(response.data['warnings'], [])

    def test_water_contamination_flag(self):
        payload = {'water_samples_collected': 10, 'contaminated_samples': 2}
        response = self.client.post('/api/v1/indices/rodent/', payload, format='json')
        self.assertEqual(response.data['indices']['water_contamination_rate'], 20.0)
        self.assertEqual(
            response.data['warnings'],
            ['High risk: Water contamination above 15% threshold'],
        )


class ThresholdsAPITests(IndicesAPITestBase):

    def test_default_thresholds(self):
        response = self.client.get('/api/v1/indices/thresholds/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {
            'house_index': 5.0,
            'breteau_index': 20.0,
            'rodent_index': 10.0,
            'water_contamination_rate': 15.0,
        })

    @override_settings(SURVEILLANCE_INDICES={'RODENT_INDEX_THRESHOLD': 12})
    def test_overridden_threshold_applies_to_calculation(self):
        response = self.client.get('/api/v1/indices/thresholds/')
        self.assertEqual(response.data['rodent_index'], 12.0)

        response = self.client.post(
            '/api/v1/indices/rodent/',
            {'areas_inspected': 50, 'rodent_sightings': 6},
            format='json',
        )
        self.assertEqual(response.data['indices']['rodent_index'], 12.0)
        self.assertFalse(response.data['risk']['high_risk'])


class SurveyReportAPITests(IndicesAPITestBase):

    def test_report(self):
        response = self.client.post('/api/v1/indices/report/', self.report_payload(), format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['survey_count'], 3)
        self.assertEqual(response.data['high_risk_count'], 3)
        self.assertEqual(
            response.data['surveys'][0]['metadata'],
            {'label': 'East Region', 'survey_date': '2024-01-15'},
        )
        self.assertEqual(
            response.data['pooled']['vector']['indices'],
            {'house_index': 14.3, 'container_index': 20.0, 'breteau_index': 30.0},
        )
        self.assertEqual(response.data['pooled']['rodent']['indices']['rodent_index'], 12.0)

    def test_empty_report_rejected(self):
        response = self.client.post('/api/v1/indices/report/', {'surveys': []}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_unknown_domain_rejected(self):
        payload = {'surveys': [{'domain': 'dengue', 'counters': {}}]}
        response = self.client.post('/api/v1/indices/report/', payload, format='json')
        self.assertEqual(response.status_code, 400)

    def test_invalid_counter_rejected(self):
        payload = {'surveys': [{'domain': 'rodent', 'counters': {'traps_set': -2}}]}
        response = self.client.post('/api/v1/indices/report/', payload, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('counters', response.data['surveys'][0])

    @override_settings(SURVEILLANCE_INDICES={'MAX_REPORT_SURVEYS': 2})
    def test_report_size_limit(self):
        response = self.client.post('/api/v1/indices/report/', self.report_payload(), format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('surveys', response.data)

    def test_csv_export(self):
        response = self.client.post(
            '/api/v1/indices/report/export/', self.report_payload(), format='json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn('attachment; filename="surveillance-report-', response['Content-Disposition'])

        content = b''.join(response.streaming_content).decode()
        rows = list(csv.reader(StringIO(content)))
        self.assertEqual(rows[0][0], 'Scope')
        self.assertEqual(len(rows), 1 + 3 + 2)
        self.assertEqual(rows[1][2], 'East Region')
        self.assertEqual(rows[1][4], '2024-01-15')
