"""Survey entry forms.

Field workers type counts into free-text inputs and the indices are
recomputed on every keystroke. These forms are deliberately lenient:
whatever was typed is reduced to a non-negative integer (blank or
unparseable text becomes 0, negatives clamp to 0, huge values saturate
at MAX_COUNT) so the engine only ever sees valid counters.
"""

import math
import re

from django import forms

from .logic.data_models import MAX_COUNT, Domain, RodentBorneCounters, VectorBorneCounters

_LEADING_INT = re.compile(r'^([+-]?)0*(\d+)')
_MAX_DIGITS = len(str(MAX_COUNT))


def _clamp(value: int) -> int:
    return min(max(0, value), MAX_COUNT)


def parse_count(value) -> int:
    """Reduce free-text input to an integer in [0, MAX_COUNT].

    >>> parse_count('12abc'), parse_count(' 7 '), parse_count('-3'), parse_count('')
    (12, 7, 0, 0)
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return _clamp(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return _clamp(math.floor(value))

    match = _LEADING_INT.match(str(value).strip())
    if not match:
        return 0
    sign, digits = match.groups()
    if sign == '-':
        return 0
    # Long digit runs never reach int(); they saturate.
    if len(digits) > _MAX_DIGITS:
        return MAX_COUNT
    return _clamp(int(digits))


class CountField(forms.Field):
    """Form field that never fails validation; bad input reads as 0."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('initial', 0)
        super().__init__(**kwargs)

    def to_python(self, value):
        return parse_count(value)


class SurveyForm(forms.Form):
    counters_class = None

    def counters(self):
        """Build the counters record from cleaned data."""
        if not self.is_valid():
            # CountField never errors, so this only happens on unbound forms
            return self.counters_class()
        return self.counters_class(**{
            name: self.cleaned_data[name] for name in self.counters_class.field_names()
        })


class VectorSurveyForm(SurveyForm):
    counters_class = VectorBorneCounters

    houses_surveyed = CountField(label='Houses surveyed')
    positive_houses = CountField(label='Positive houses')
    containers_inspected = CountField(label='Containers inspected')
    positive_containers = CountField(label='Positive containers')


class RodentSurveyForm(SurveyForm):
    counters_class = RodentBorneCounters

    areas_inspected = CountField(label='Areas inspected')
    rodent_sightings = CountField(label='Rodent sightings')
    traps_set = CountField(label='Traps set')
    rodents_caught = CountField(label='Rodents caught')
    water_samples_collected = CountField(label='Water samples collected')
    contaminated_samples = CountField(label='Contaminated samples')


SURVEY_FORMS = {
    Domain.VECTOR: VectorSurveyForm,
    Domain.RODENT: RodentSurveyForm,
}


def survey_form_for(domain, data=None) -> SurveyForm:
    """Return a bound survey form for the given domain."""
    return SURVEY_FORMS[Domain(domain)](data=data if data is not None else {})
