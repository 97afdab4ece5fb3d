"""
Field Survey Indices - Test Settings

Console logging only, in-memory database, fixed thresholds.
"""

from .base import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

LOGGING['handlers'].pop('file')
LOGGING['loggers']['django']['handlers'] = ['console']
LOGGING['loggers']['apps']['handlers'] = ['console']
LOGGING['loggers']['apps']['level'] = 'WARNING'

SURVEILLANCE_INDICES = {
    'HOUSE_INDEX_THRESHOLD': 5.0,
    'BRETEAU_INDEX_THRESHOLD': 20.0,
    'RODENT_INDEX_THRESHOLD': 10.0,
    'WATER_CONTAMINATION_THRESHOLD': 15.0,
    'MAX_REPORT_SURVEYS': 500,
}
