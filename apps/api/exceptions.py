"""
Exception handler for the survey indices API.

Turns engine InvalidInput errors into 400 responses so that callers can
re-prompt instead of seeing a server error, and logs every API error
server-side.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.indices.logic.data_models import InvalidInput

logger = logging.getLogger('apps.api')


def indices_exception_handler(exc, context):
    """
    Custom exception handler for the indices API.

    - Uses DRF's default handler for standard error formatting
    - Converts InvalidInput into a 400 with the offending field
    - Logs the error server-side
    """
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown'

    if isinstance(exc, InvalidInput):
        logger.warning('Invalid survey input in %s: %s', view_name, exc)
        return Response(
            {'detail': exc.reason, 'field': exc.field},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)

    if response is not None:
        logger.warning(
            'API error in %s: %s (status %s)',
            view_name, exc, response.status_code,
        )

    return response
