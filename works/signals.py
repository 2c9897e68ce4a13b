import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import TaskInstance, Work, WorkPeriodInstance
from .scheduler.errors import RecurrenceError

logger = logging.getLogger(__name__)


def _generate_first_period(work_id):
    from .tasks.period_generation import generate_periods_and_tasks

    try:
        result = generate_periods_and_tasks(work_id)
    except RecurrenceError as exc:
        logger.warning(f"No period generated for new work {work_id}: {exc.kind}: {exc.message}")
        return
    if result.error:
        logger.error(f"Period generation failed for new work {work_id}: {result.error}")


@receiver(post_save, sender=Work)
def generate_period_on_work_creation(sender, instance, created, **kwargs):
    # Run after commit so task templates saved alongside the work are included
    if created and instance.is_active:
        transaction.on_commit(lambda: _generate_first_period(instance.pk))


@receiver(post_save, sender=TaskInstance)
def sync_period_status(sender, instance, created, update_fields=None, **kwargs):
    if created:
        return
    if update_fields is not None and 'status' not in update_fields:
        return
    # Reload: a period cached on the task may be stale
    period = WorkPeriodInstance.objects.get(pk=instance.period_instance_id)
    period.sync_status_from_tasks()
