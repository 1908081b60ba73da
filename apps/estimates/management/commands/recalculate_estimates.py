"""
Management command to recompute the stored totals of every estimate.

Fixes estimates whose totals went stale, e.g. after labor minimum rules
change or when tax-exempt flags were stored in an old format.

Usage:
    python manage.py recalculate_estimates [--dry-run]
"""

from django.core.management.base import BaseCommand

from apps.estimates.services import recalculate_all_estimates


class Command(BaseCommand):
    help = 'Recompute stored totals of all estimates'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show which estimates would change without saving',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        changed = recalculate_all_estimates(dry_run=dry_run)

        if not changed:
            self.stdout.write(self.style.SUCCESS('All estimate totals are up to date.'))
            return

        self.stdout.write(f'\n{len(changed)} estimate(s) with stale totals:\n')
        for estimate_number in changed:
            self.stdout.write(f'  - {estimate_number}')

        if dry_run:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        self.stdout.write(self.style.SUCCESS(f'\nUpdated {len(changed)} estimate(s).'))
