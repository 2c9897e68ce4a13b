from django.utils import timezone
from works.models import Work
from works.scheduler.errors import RecurrenceError
from works.tasks.period_generation import generate_periods_and_tasks
import logging

logger = logging.getLogger(__name__)


def run_period_generation_job(reference_date=None, work_ids=None):
    """
    Scheduler job:
    - Walk every active recurring work
    - Generate the framed period and its tasks for `reference_date`
    - Idempotent: periods that already exist are skipped
    - Misconfigured works are counted as invalid
    - One failing work never stops the batch

    Returns a summary dict of counts.
    """
    reference_date = reference_date or timezone.localdate()
    works = Work.objects.filter(is_active=True).order_by('id')
    if work_ids:
        works = works.filter(id__in=work_ids)

    summary = {'created': 0, 'skipped': 0, 'invalid': 0, 'failed': 0}

    for work_id in works.values_list('id', flat=True):
        try:
            result = generate_periods_and_tasks(work_id, reference_date)
        except RecurrenceError as exc:
            logger.warning(f"Work {work_id} not generated: {exc.kind}: {exc.message}")
            summary['invalid'] += 1
            continue
        except Exception:
            logger.exception(f"Unexpected error generating periods for work {work_id}")
            summary['failed'] += 1
            continue

        if result.error:
            summary['failed'] += 1
        elif result.created is not None:
            summary['created'] += 1
        else:
            summary['skipped'] += 1

    logger.info(
        f"Period generation for {reference_date.isoformat()}: "
        f"{summary['created']} created, {summary['skipped']} skipped, "
        f"{summary['invalid']} invalid, {summary['failed']} failed"
    )
    return summary
