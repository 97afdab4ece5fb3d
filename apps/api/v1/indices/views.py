"""Views for the Survey Indices API."""

from django.http import StreamingHttpResponse
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.throttling import CalculateRateThrottle, ReportRateThrottle
from apps.indices.logic import config as cfg
from apps.indices.services import IndexCalculationService

from .serializers import (
    RodentCountersSerializer,
    SurveyEvaluationSerializer,
    SurveyReportRequestSerializer,
    ThresholdsSerializer,
    VectorCountersSerializer,
)


class IndicesCalculationView(APIView):
    """Base view: validate counters, compute indices and risk flags."""

    permission_classes = [AllowAny]
    throttle_classes = [CalculateRateThrottle]
    serializer_class = None

    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        evaluation = IndexCalculationService().evaluate(serializer.to_counters())
        return Response(evaluation.to_dict())


@extend_schema(request=VectorCountersSerializer, responses=SurveyEvaluationSerializer)
class VectorIndicesView(IndicesCalculationView):
    """
    House, Container and Breteau indices.

    POST /api/v1/indices/vector/
    """
    serializer_class = VectorCountersSerializer


@extend_schema(request=RodentCountersSerializer, responses=SurveyEvaluationSerializer)
class RodentIndicesView(IndicesCalculationView):
    """
    Rodent Index, Trap Success Rate and Water Contamination Rate.

    POST /api/v1/indices/rodent/
    """
    serializer_class = RodentCountersSerializer


class ThresholdsView(APIView):
    """
    Configured risk thresholds.

    GET /api/v1/indices/thresholds/
    """

    permission_classes = [AllowAny]
    throttle_classes = [CalculateRateThrottle]

    @extend_schema(responses=ThresholdsSerializer)
    def get(self, request):
        return Response(cfg.get_thresholds().to_dict())


class SurveyReportView(APIView):
    """
    Evaluate a batch of surveys with pooled indices per domain.

    POST /api/v1/indices/report/
    """

    permission_classes = [AllowAny]
    throttle_classes = [ReportRateThrottle]

    def build_report(self, request):
        serializer = SurveyReportRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return IndexCalculationService().build_report(serializer.validated_data['surveys'])

    @extend_schema(request=SurveyReportRequestSerializer, responses=OpenApiTypes.OBJECT)
    def post(self, request):
        return Response(self.build_report(request).to_dict())


class SurveyReportExportView(SurveyReportView):
    """
    Same batch as SurveyReportView, returned as a CSV attachment.

    POST /api/v1/indices/report/export/
    """

    @extend_schema(request=SurveyReportRequestSerializer, responses={(200, 'text/csv'): OpenApiTypes.STR})
    def post(self, request):
        report = self.build_report(request)
        filename = f"surveillance-report-{timezone.localdate().isoformat()}.csv"
        response = StreamingHttpResponse(report.csv_rows(), content_type='text/csv')
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response
