"""Serializers for the Survey Indices API."""

from rest_framework import serializers

from apps.indices.logic import config as cfg
from apps.indices.logic.data_models import MAX_COUNT, Domain, RodentBorneCounters, VectorBorneCounters


class VectorCountersSerializer(serializers.Serializer):
    """Larval survey counts. Omitted fields count as 0."""
    houses_surveyed = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)
    positive_houses = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)
    containers_inspected = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)
    positive_containers = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)

    def to_counters(self) -> VectorBorneCounters:
        return VectorBorneCounters(**self.validated_data)


class RodentCountersSerializer(serializers.Serializer):
    """Rodent and water sampling counts. Omitted fields count as 0."""
    areas_inspected = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)
    rodent_sightings = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)
    traps_set = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)
    rodents_caught = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)
    water_samples_collected = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)
    contaminated_samples = serializers.IntegerField(min_value=0, max_value=MAX_COUNT, default=0)

    def to_counters(self) -> RodentBorneCounters:
        return RodentBorneCounters(**self.validated_data)


COUNTER_SERIALIZERS = {
    Domain.VECTOR.value: VectorCountersSerializer,
    Domain.RODENT.value: RodentCountersSerializer,
}


class SurveyEntrySerializer(serializers.Serializer):
    """One survey in a report request."""
    domain = serializers.ChoiceField(choices=Domain.all_options())
    counters = serializers.DictField(default=dict)
    label = serializers.CharField(required=False, allow_blank=True, max_length=200)
    region = serializers.CharField(required=False, allow_blank=True, max_length=200)
    survey_date = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        counters = COUNTER_SERIALIZERS[attrs['domain']](data=attrs.get('counters') or {})
        if not counters.is_valid():
            raise serializers.ValidationError({'counters': counters.errors})
        attrs['counters'] = dict(counters.validated_data)
        return attrs


class SurveyReportRequestSerializer(serializers.Serializer):
    """Batch of surveys to evaluate and pool."""
    surveys = SurveyEntrySerializer(many=True, allow_empty=False)

    def validate_surveys(self, value):
        limit = cfg.get_max_report_surveys()
        if len(value) > limit:
            raise serializers.ValidationError(f"At most {limit} surveys per report.")
        return value


class ThresholdsSerializer(serializers.Serializer):
    house_index = serializers.FloatField()
    breteau_index = serializers.FloatField()
    rodent_index = serializers.FloatField()
    water_contamination_rate = serializers.FloatField()


class RiskSerializer(serializers.Serializer):
    domain = serializers.ChoiceField(choices=Domain.all_options())
    high_risk = serializers.BooleanField()
    flags = serializers.ListField(child=serializers.CharField())


class SurveyEvaluationSerializer(serializers.Serializer):
    """Response shape of a single evaluation (documentation only)."""
    domain = serializers.ChoiceField(choices=Domain.all_options())
    counters = serializers.DictField(child=serializers.IntegerField())
    indices = serializers.DictField(child=serializers.FloatField())
    display = serializers.DictField(child=serializers.CharField())
    risk = RiskSerializer()
    warnings = serializers.ListField(child=serializers.CharField())
    metadata = serializers.DictField(child=serializers.CharField(), required=False)
