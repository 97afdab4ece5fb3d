"""
Field Survey Indices - Development Settings
"""

from .base import *

DEBUG = True

SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

LOGGING['handlers']['console']['formatter'] = 'simple'
