"""
Survey Indices - URL Configuration
"""

from django.urls import path
from . import views

app_name = 'indices'

urlpatterns = [
    path('live/<str:domain>/', views.live_indices, name='live'),
]
