from django.db import DatabaseError, IntegrityError, InterfaceError, OperationalError, transaction

from works.models import TaskInstance, WorkPeriodInstance
from works.scheduler.errors import BatchInsertFailed, DuplicatePeriod, StoreUnavailable


class DjangoWorkStore:
    """
    Persistence collaborator for period generation.
    Duplicate prevention relies on the (work, period_start) unique constraint.
    """

    def find_instance(self, work_id, period_start):
        try:
            return WorkPeriodInstance.objects.filter(work_id=work_id, period_start=period_start).first()
        except (OperationalError, InterfaceError) as exc:
            raise StoreUnavailable(str(exc)) from exc

    def insert_instances(self, period, tasks):
        """
        Insert the period and all of its tasks as one atomic batch.
        Returns (period_instance, task_instances).
        """
        try:
            with transaction.atomic():
                instance = WorkPeriodInstance.objects.create(
                    work_id=period.work_id,
                    period_name=period.period_name,
                    period_start=period.period_start,
                    period_end=period.period_end,
                    due_date=period.due_date,
                    status=period.status,
                )
                task_instances = TaskInstance.objects.bulk_create([
                    TaskInstance(
                        period_instance=instance,
                        template_id=task.task_template_id,
                        title=task.title,
                        description=task.description,
                        priority=task.priority,
                        sort_order=task.sort_order,
                        assigned_to_id=task.assigned_to_id,
                        window_start=task.window_start,
                        window_end=task.window_end,
                        due_date=task.due_date,
                    )
                    for task in tasks
                ])
        except IntegrityError as exc:
            # Another caller won the race for this period
            if self.find_instance(period.work_id, period.period_start) is not None:
                raise DuplicatePeriod(str(exc)) from exc
            raise BatchInsertFailed(str(exc)) from exc
        except (OperationalError, InterfaceError) as exc:
            raise StoreUnavailable(str(exc)) from exc
        except DatabaseError as exc:
            raise BatchInsertFailed(str(exc)) from exc

        return instance, task_instances
