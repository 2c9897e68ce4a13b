import logging
import time
from dataclasses import dataclass, field
from datetime import date

from django.conf import settings
from django.utils import timezone

from works.models import Work
from works.scheduler.definitions import Window
from works.scheduler.due_dates import resolve_due_date
from works.scheduler.errors import BatchInsertFailed, ClampedDateWarning, DuplicatePeriod, StoreUnavailable
from works.scheduler.framing import frame_period
from works.scheduler.overrides import merge
from works.scheduler.recurrence import compute_cycle_boundaries, windows_starting_between
from works.scheduler.status import PENDING
from works.tasks.store import DjangoWorkStore
from works.tasks.task_copy import build_period_name, build_task_title

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodInstanceDraft:
    work_id: object
    period_name: str
    period_start: date
    period_end: date
    due_date: date
    status: str = PENDING


@dataclass(frozen=True)
class TaskInstanceDraft:
    task_template_id: object
    title: str
    window_start: date
    window_end: date
    due_date: date
    description: str = ""
    priority: str = "medium"
    sort_order: int = 0
    assigned_to_id: int = None


@dataclass(frozen=True)
class PeriodPlan:
    period: PeriodInstanceDraft
    tasks: tuple
    warnings: tuple = ()

    def as_dict(self):
        return {
            "period_name": self.period.period_name,
            "period_start": self.period.period_start.isoformat(),
            "period_end": self.period.period_end.isoformat(),
            "due_date": self.period.due_date.isoformat(),
            "tasks": [
                {
                    "task_template_id": task.task_template_id,
                    "title": task.title,
                    "window_start": task.window_start.isoformat(),
                    "window_end": task.window_end.isoformat(),
                    "due_date": task.due_date.isoformat(),
                }
                for task in self.tasks
            ],
            "warnings": [warning.as_dict() for warning in self.warnings],
        }


@dataclass
class GenerationResult:
    work_id: object
    window: Window = None
    created: object = None
    tasks: list = field(default_factory=list)
    skipped: str = None
    warnings: list = field(default_factory=list)
    error: dict = None

    @property
    def ok(self):
        return self.error is None

    def as_dict(self):
        return {
            "work_id": self.work_id,
            "period_start": self.window.start.isoformat() if self.window else None,
            "period_end": self.window.end.isoformat() if self.window else None,
            "created": self.created.pk if self.created is not None else None,
            "task_count": len(self.tasks),
            "skipped": self.skipped,
            "warnings": [warning.as_dict() for warning in self.warnings],
            "error": self.error,
        }


def _window_warnings(window, warnings):
    if window.clamped_from is not None:
        warning = ClampedDateWarning(window.clamped_from, window.start)
        if warning not in warnings:
            warnings.append(warning)


def plan_period(work, window):
    """
    Everything generation would write for one work window, computed
    without touching the store. Shared by generation and the preview.
    """
    warnings = []
    _window_warnings(window, warnings)

    due_date = resolve_due_date(window, work.due_rule, warnings)
    period = PeriodInstanceDraft(
        work_id=work.work_id,
        period_name=build_period_name(work.recurrence, window),
        period_start=window.start,
        period_end=window.end,
        due_date=due_date,
    )

    tasks = []
    for blueprint in work.tasks:
        config = merge(work.recurrence, work.due_rule, blueprint.override)
        task_windows = [
            task_window
            for task_window in windows_starting_between(config.recurrence, window.start, window.end)
            if config.starts_on is None or task_window.end > config.starts_on
        ]
        for task_window in task_windows:
            _window_warnings(task_window, warnings)
            tasks.append(TaskInstanceDraft(
                task_template_id=config.task_template_id,
                title=build_task_title(
                    blueprint.title,
                    period.period_name,
                    config.recurrence,
                    task_window,
                    repeated=len(task_windows) > 1,
                ),
                window_start=task_window.start,
                window_end=task_window.end,
                due_date=resolve_due_date(task_window, config.due_rule, warnings),
                description=blueprint.description,
                priority=blueprint.priority,
                sort_order=blueprint.sort_order,
                assigned_to_id=blueprint.assigned_to_id or work.assigned_to_id,
            ))

    tasks.sort(key=lambda task: (task.sort_order, task.window_start))
    return PeriodPlan(period=period, tasks=tuple(tasks), warnings=tuple(warnings))


def _call_store(operation, *args, backoff):
    # Transient failures get exactly one retry
    try:
        return operation(*args)
    except StoreUnavailable as exc:
        logger.warning(f"Store unavailable ({exc.message}); retrying in {backoff}s")
        time.sleep(backoff)
        return operation(*args)


def generate(work, reference_date, store, retry_backoff=None):
    """
    Create the framed period of a recurring work and its task instances.

    Validation errors (InvalidRecurrenceConfig, InvalidOffset,
    UnresolvedPeriod) raise before the store is touched. An existing
    period is a no-op reported as skipped=DuplicatePeriod; store failures
    come back as result.error = {kind, message}.
    """
    if retry_backoff is None:
        retry_backoff = getattr(settings, "RECURRING_WORK_RETRY_BACKOFF", 0.5)

    window = frame_period(work.recurrence, reference_date, work.framing_policy)
    plan = plan_period(work, window)
    result = GenerationResult(work_id=work.work_id, window=window, warnings=list(plan.warnings))
    for warning in plan.warnings:
        logger.warning(f"Work {work.work_id}, {plan.period.period_name}: {warning}")

    try:
        existing = _call_store(store.find_instance, work.work_id, window.start, backoff=retry_backoff)
        if existing is not None:
            raise DuplicatePeriod(f"Period starting {window.start.isoformat()} already exists")
        created, tasks = _call_store(store.insert_instances, plan.period, list(plan.tasks), backoff=retry_backoff)
    except DuplicatePeriod:
        logger.info(f"Skipped work {work.work_id}: period {plan.period.period_name} already exists")
        result.skipped = DuplicatePeriod.kind
        return result
    except (StoreUnavailable, BatchInsertFailed) as exc:
        logger.error(f"Could not create period {plan.period.period_name} for work {work.work_id}: {exc.message}")
        result.error = exc.as_dict()
        return result

    result.created = created
    result.tasks = list(tasks)
    logger.info(
        f"Created period '{plan.period.period_name}' for work {work.work_id} with {len(result.tasks)} task(s)"
    )
    return result


def generate_periods_and_tasks(work_id, reference_date=None, store=None):
    """
    Entry point used at work creation, by the daily job, the management
    command and the generate view.
    """
    work = Work.objects.prefetch_related("task_templates").get(pk=work_id)
    reference_date = reference_date or timezone.localdate()
    return generate(work.to_recurring_work(), reference_date, store or DjangoWorkStore())


def preview_periods(work, reference_date, count):
    """
    Upcoming periods for a work (framed window first), with work and task
    due dates, for the interactive preview. Nothing is written.
    """
    first = frame_period(work.recurrence, reference_date, work.framing_policy)
    return [
        plan_period(work, window)
        for window in compute_cycle_boundaries(work.recurrence, first.start, count)
    ]
