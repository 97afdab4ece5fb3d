"""
API v1 URL configuration.
"""

from django.urls import path

from .indices.views import (
    RodentIndicesView,
    SurveyReportExportView,
    SurveyReportView,
    ThresholdsView,
    VectorIndicesView,
)

app_name = 'api-v1'

urlpatterns = [
    path('indices/vector/', VectorIndicesView.as_view(), name='indices-vector'),
    path('indices/rodent/', RodentIndicesView.as_view(), name='indices-rodent'),
    path('indices/thresholds/', ThresholdsView.as_view(), name='indices-thresholds'),
    path('indices/report/', SurveyReportView.as_view(), name='indices-report'),
    path('indices/report/export/', SurveyReportExportView.as_view(), name='indices-report-export'),
]
