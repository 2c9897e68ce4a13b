import logging

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from works.scheduler.definitions import (
    ANCHOR_CHOICES,
    DAYS,
    DueDateRule,
    FRAMING_POLICY_CHOICES,
    FREQUENCY_CHOICES,
    INHERIT,
    MONTHLY,
    OFFSET_TYPE_CHOICES,
    PERIOD_END,
    PREVIOUS_PERIOD,
    RecurrenceDefinition,
    RecurringWork,
    TaskBlueprint,
    TaskRecurrenceOverride,
    WEEKDAY_CHOICES,
)
from works.scheduler.errors import InvalidOffset, InvalidRecurrenceConfig
from works.scheduler.overrides import merge
from works.scheduler.status import (
    CANCELLED,
    COMPLETED,
    IN_PROGRESS,
    PENDING,
    STATUS_CHOICES,
    check_transition,
)

logger = logging.getLogger(__name__)

PRIORITY_CHOICES = [('high', 'High'), ('medium', 'Medium'), ('low', 'Low')]

DAY_OF_MONTH_VALIDATORS = [MinValueValidator(1), MaxValueValidator(31)]
MONTH_VALIDATORS = [MinValueValidator(1), MaxValueValidator(12)]


# -------------------------
# 1. Recurring Work
# -------------------------
class Work(models.Model):
    """
    A recurring service obligation for a client (e.g. a monthly GST return).
    Periods and their tasks are generated from the recurrence fields below.
    """
    # --- Identity ---
    title = models.CharField(max_length=255)
    client_name = models.CharField(max_length=255, blank=True)
    assigned_to = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='assigned_works')
    is_active = models.BooleanField(default=True)

    # --- Recurrence ---
    frequency = models.CharField(max_length=20, choices=FREQUENCY_CHOICES, default=MONTHLY)
    weekday = models.CharField(max_length=10, choices=WEEKDAY_CHOICES, default='monday',
                               help_text="Day the cycle starts on (weekly)")
    start_day = models.PositiveSmallIntegerField(default=1, validators=DAY_OF_MONTH_VALIDATORS,
                                                 help_text="Day of month the cycle starts on")
    start_month = models.PositiveSmallIntegerField(default=4, validators=MONTH_VALIDATORS,
                                                   help_text="Month the cycles align to (financial year start)")
    effective_start_date = models.DateField(default=timezone.localdate)
    effective_end_date = models.DateField(blank=True, null=True)
    framing_policy = models.CharField(max_length=20, choices=FRAMING_POLICY_CHOICES, default=PREVIOUS_PERIOD)

    # --- Work level due date ---
    due_offset_type = models.CharField(max_length=10, choices=OFFSET_TYPE_CHOICES, default=DAYS)
    due_offset_value = models.IntegerField(default=0)
    due_anchor = models.CharField(max_length=20, choices=ANCHOR_CHOICES, default=PERIOD_END)
    exact_due_date = models.DateField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        if self.client_name:
            return f"{self.title} ({self.client_name})"
        return self.title

    def recurrence_definition(self):
        return RecurrenceDefinition(
            frequency=self.frequency,
            effective_start_date=self.effective_start_date,
            weekday=self.weekday or None,
            start_day=self.start_day,
            start_month=self.start_month,
            effective_end_date=self.effective_end_date,
        )

    def due_date_rule(self):
        return DueDateRule(
            offset_type=self.due_offset_type,
            offset_value=self.due_offset_value,
            anchored_to=self.due_anchor,
            exact_date=self.exact_due_date,
        )

    def to_recurring_work(self):
        """Immutable snapshot handed to the generation core."""
        return RecurringWork(
            work_id=self.pk,
            title=self.title,
            recurrence=self.recurrence_definition(),
            framing_policy=self.framing_policy,
            due_rule=self.due_date_rule(),
            tasks=tuple(
                template.to_blueprint()
                for template in self.task_templates.all()
                if template.is_active
            ),
            assigned_to_id=self.assigned_to_id,
        )

    def clean(self):
        super().clean()
        try:
            self.recurrence_definition().validate()
        except InvalidRecurrenceConfig as exc:
            raise ValidationError({'frequency': exc.message})
        try:
            self.due_date_rule().validate()
        except InvalidOffset as exc:
            raise ValidationError({'due_offset_value': exc.message})


# -------------------------
# 2. Task templates (per work, with optional overrides)
# -------------------------
class WorkTaskTemplate(models.Model):
    TASK_FREQUENCY_CHOICES = [(INHERIT, 'Inherit from work')] + FREQUENCY_CHOICES

    work = models.ForeignKey(Work, on_delete=models.CASCADE, related_name='task_templates')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    start_date = models.DateField(blank=True, null=True, help_text="Skip task cycles ending before this date")
    assigned_to = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='assigned_task_templates')

    # --- Overrides: empty means "use the work's value" ---
    task_frequency = models.CharField(max_length=20, choices=TASK_FREQUENCY_CHOICES, blank=True, null=True)
    weekday = models.CharField(max_length=10, choices=WEEKDAY_CHOICES, blank=True, null=True)
    start_day = models.PositiveSmallIntegerField(blank=True, null=True, validators=DAY_OF_MONTH_VALIDATORS)
    start_month = models.PositiveSmallIntegerField(blank=True, null=True, validators=MONTH_VALIDATORS)
    due_offset_type = models.CharField(max_length=10, choices=OFFSET_TYPE_CHOICES, blank=True, null=True)
    due_offset_value = models.IntegerField(blank=True, null=True)
    due_anchor = models.CharField(max_length=20, choices=ANCHOR_CHOICES, blank=True, null=True)
    exact_due_date = models.DateField(blank=True, null=True)

    class Meta:
        ordering = ['sort_order', 'id']

    def __str__(self):
        return f"{self.title} ({self.work.title})"

    def to_override(self):
        return TaskRecurrenceOverride(
            task_template_id=self.pk,
            frequency=self.task_frequency or None,
            weekday=self.weekday or None,
            start_day=self.start_day,
            start_month=self.start_month,
            effective_start_date=self.start_date,
            offset_type=self.due_offset_type or None,
            offset_value=self.due_offset_value,
            anchored_to=self.due_anchor or None,
            exact_date=self.exact_due_date,
        )

    def clean(self):
        super().clean()
        if self.work_id is None:
            return
        # Overrides are checked against the work they merge into
        try:
            merge(self.work.recurrence_definition(), self.work.due_date_rule(), self.to_override())
        except InvalidRecurrenceConfig as exc:
            raise ValidationError({'task_frequency': exc.message})
        except InvalidOffset as exc:
            raise ValidationError({'due_offset_value': exc.message})

    def to_blueprint(self):
        return TaskBlueprint(
            override=self.to_override(),
            title=self.title,
            description=self.description,
            priority=self.priority,
            sort_order=self.sort_order,
            assigned_to_id=self.assigned_to_id,
        )


# -------------------------
# 3. Generated instances
# -------------------------
class StatusTransitionMixin(models.Model):
    """pending -> in_progress -> completed, or pending -> cancelled."""
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)

    class Meta:
        abstract = True

    def transition_to(self, new_status):
        old_status = self.status
        check_transition(old_status, new_status)
        self.status = new_status
        self.save(update_fields=['status', 'updated_at'])
        logger.info(f"{self.__class__.__name__} {self.pk}: {old_status} -> {new_status}")
        return self

    @property
    def is_overdue(self):
        return self.status in (PENDING, IN_PROGRESS) and timezone.localdate() > self.due_date


class WorkPeriodInstance(StatusTransitionMixin):
    work = models.ForeignKey(Work, on_delete=models.CASCADE, related_name='period_instances')
    period_name = models.CharField(max_length=100)
    period_start = models.DateField()
    # Exclusive: the start of the following cycle
    period_end = models.DateField()
    due_date = models.DateField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-period_start']
        constraints = [
            models.UniqueConstraint(fields=['work', 'period_start'], name='unique_work_period_start'),
        ]

    def __str__(self):
        return f"{self.work.title} - {self.period_name}"

    def sync_status_from_tasks(self):
        """
        Roll task progress up to the period: any started task moves a
        pending period to in_progress; once every non-cancelled task is
        completed the period is completed.
        """
        if self.status in (COMPLETED, CANCELLED):
            return self

        statuses = [
            status
            for status in self.task_instances.values_list('status', flat=True)
            if status != CANCELLED
        ]
        if not statuses:
            return self

        if self.status == PENDING and any(status in (IN_PROGRESS, COMPLETED) for status in statuses):
            self.transition_to(IN_PROGRESS)

        if self.status == IN_PROGRESS and all(status == COMPLETED for status in statuses):
            self.transition_to(COMPLETED)
        return self


class TaskInstance(StatusTransitionMixin):
    period_instance = models.ForeignKey(WorkPeriodInstance, on_delete=models.CASCADE,
                                        related_name='task_instances')
    template = models.ForeignKey(WorkTaskTemplate, on_delete=models.SET_NULL, null=True, blank=True,
                                 related_name='task_instances')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    sort_order = models.PositiveIntegerField(default=0)
    assigned_to = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='assigned_task_instances')

    # The task's own cycle window, [window_start, window_end)
    window_start = models.DateField()
    window_end = models.DateField()
    due_date = models.DateField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'window_start', 'id']

    def __str__(self):
        return self.title
