"""
Management command for computing survey indices from the command line.

Counter values are free text and are parsed the same way as the survey
entry forms (blank or unparseable values read as 0).

Usage:
    python manage.py compute_indices vector --houses-surveyed 200 --positive-houses 10 \\
        --containers-inspected 400 --positive-containers 80
    python manage.py compute_indices rodent --areas-inspected 50 --rodent-sightings 7 --json
"""

import json

from django.core.management.base import BaseCommand

from apps.indices.display import INDEX_LABELS
from apps.indices.forms import survey_form_for
from apps.indices.logic.data_models import Domain, RodentBorneCounters, VectorBorneCounters
from apps.indices.services import COUNTER_CLASSES, IndexCalculationService


def _option(name):
    return '--' + name.replace('_', '-')


class Command(BaseCommand):
    help = 'Compute epidemiological indices and risk flags for one survey'

    def add_arguments(self, parser):
        parser.add_argument(
            'domain', choices=[d.value for d in Domain],
            help='Survey domain',
        )
        counter_names = dict.fromkeys(
            VectorBorneCounters.field_names() + RodentBorneCounters.field_names()
        )
        for name in counter_names:
            parser.add_argument(
                _option(name), dest=name, default=None,
                help=f"{name.replace('_', ' ').capitalize()} (free text, default 0)",
            )
        parser.add_argument(
            '--json', action='store_true',
            help='Print the evaluation as JSON',
        )

    def handle(self, *args, **options):
        domain = Domain(options['domain'])
        form = survey_form_for(domain, {
            name: options[name] for name in COUNTER_CLASSES[domain].field_names()
            if options.get(name) is not None
        })
        evaluation = IndexCalculationService().evaluate(form.counters())

        if options['json']:
            self.stdout.write(json.dumps(evaluation.to_dict(), indent=2))
            return

        self._show_results(evaluation)

    def _show_results(self, evaluation):
        """Display computed indices and warnings."""
        self.stdout.write(self.style.SUCCESS(
            f"\n=== {Domain.display_name(evaluation.domain)} Indices ===\n"
        ))

        for name, value in evaluation.counters.to_dict().items():
            self.stdout.write(f"  {name.replace('_', ' ').capitalize():<26}{value}")

        self.stdout.write("")
        for name, text in evaluation.display.items():
            self.stdout.write(f"  {INDEX_LABELS[name]:<26}{text}")

        if evaluation.warnings:
            self.stdout.write("")
            for warning in evaluation.warnings:
                self.stdout.write(self.style.WARNING(f"  {warning}"))
        else:
            self.stdout.write(self.style.SUCCESS("\n  No high-risk indicators"))

