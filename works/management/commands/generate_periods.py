from datetime import date

from django.core.management.base import BaseCommand, CommandError

from works.jobs import run_period_generation_job


class Command(BaseCommand):
    help = 'Generate the framed period and its tasks for recurring works'

    def add_arguments(self, parser):
        parser.add_argument('--work', type=int, action='append', dest='work_ids',
                            help='Only generate for this work id (repeatable)')
        parser.add_argument('--date', type=str, dest='reference_date',
                            help='Reference date as YYYY-MM-DD (defaults to today)')

    def handle(self, *args, **options):
        reference_date = None
        if options['reference_date']:
            try:
                reference_date = date.fromisoformat(options['reference_date'])
            except ValueError:
                raise CommandError(f"Invalid --date: {options['reference_date']}")

        summary = run_period_generation_job(reference_date=reference_date, work_ids=options['work_ids'])

        self.stdout.write(self.style.SUCCESS(
            f"Created {summary['created']}, skipped {summary['skipped']}, "
            f"invalid {summary['invalid']}, failed {summary['failed']}"
        ))
