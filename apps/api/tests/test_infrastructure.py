"""Tests for API infrastructure: exception handling, throttling, schema docs."""

from django.conf import settings
from django.test import TestCase
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from apps.api.exceptions import indices_exception_handler
from apps.api.throttling import CalculateRateThrottle, ReportRateThrottle
from apps.indices.logic.data_models import InvalidInput


class ExceptionHandlerTests(TestCase):
    """InvalidInput exception handler tests."""

    def test_invalid_input_becomes_400(self):
        exc = InvalidInput('positive_houses', -1, 'must be non-negative')
        response = indices_exception_handler(exc, {'view': None})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {
            'detail': 'must be non-negative',
            'field': 'positive_houses',
        })

    def test_drf_errors_use_default_handler(self):
        response = indices_exception_handler(ValidationError({'traps_set': ['bad']}), {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'traps_set': ['bad']})

    def test_unhandled_exceptions_pass_through(self):
        self.assertIsNone(indices_exception_handler(RuntimeError('boom'), {}))


class ThrottleConfigTests(TestCase):
    """Verify throttle rates are configured in settings."""

    def test_throttle_rates_configured(self):
        rates = settings.REST_FRAMEWORK.get('DEFAULT_THROTTLE_RATES', {})
        self.assertIn(CalculateRateThrottle.scope, rates)
        self.assertIn(ReportRateThrottle.scope, rates)

    def test_exception_handler_registered(self):
        self.assertEqual(
            settings.REST_FRAMEWORK['EXCEPTION_HANDLER'],
            'apps.api.exceptions.indices_exception_handler',
        )


class SwaggerUITests(TestCase):
    """Verify API documentation endpoints are accessible."""

    def setUp(self):
        self.client = APIClient()

    def test_schema_endpoint_returns_200(self):
        response = self.client.get('/api/schema/')
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'/api/v1/indices/vector/', response.content)

    def test_docs_endpoint_returns_200(self):
        response = self.client.get('/api/docs/')
        self.assertEqual(response.status_code, 200)
