"""
Survey Indices - Views

Live calculator endpoint for the survey entry pages. The page sends the
raw text of every counter input on each keystroke; the text is parsed
leniently by the survey forms, so this endpoint never rejects input.
"""

from django.http import Http404, JsonResponse
from django.views.decorators.http import require_GET

from .forms import survey_form_for
from .logic.data_models import Domain
from .services import IndexCalculationService


@require_GET
def live_indices(request, domain):
    """Recompute indices from raw form text (JSON)."""
    try:
        domain = Domain(domain)
    except ValueError:
        raise Http404(f"Unknown survey domain: {domain}")

    form = survey_form_for(domain, request.GET)
    evaluation = IndexCalculationService().evaluate(form.counters())

    return JsonResponse({'success': True, 'evaluation': evaluation.to_dict()})
