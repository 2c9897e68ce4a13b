"""
Immutable value objects passed into the period generation core.

Persisted models (works.models) are converted into these once per call,
so nothing below ever reads from the database or holds process state.
"""
from dataclasses import dataclass, field
from datetime import date

from .errors import InvalidRecurrenceConfig, InvalidOffset

# -------------------------
# Frequencies
# -------------------------
DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
QUARTERLY = "quarterly"
HALF_YEARLY = "half_yearly"
YEARLY = "yearly"

FREQUENCY_CHOICES = [
    (DAILY, "Daily"),
    (WEEKLY, "Weekly"),
    (MONTHLY, "Monthly"),
    (QUARTERLY, "Quarterly"),
    (HALF_YEARLY, "Half-Yearly"),
    (YEARLY, "Yearly"),
]
FREQUENCIES = tuple(value for value, _ in FREQUENCY_CHOICES)

# Cycle length for the month based frequencies
MONTHS_PER_CYCLE = {
    MONTHLY: 1,
    QUARTERLY: 3,
    HALF_YEARLY: 6,
    YEARLY: 12,
}

# Explicit "use the parent's frequency" marker for task overrides
INHERIT = "inherit"

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
WEEKDAY_CHOICES = [(day, day.capitalize()) for day in WEEKDAYS]

# -------------------------
# Period framing
# -------------------------
PREVIOUS_PERIOD = "previous_period"
CURRENT_PERIOD = "current_period"
NEXT_PERIOD = "next_period"

FRAMING_POLICY_CHOICES = [
    (PREVIOUS_PERIOD, "Previous Period (Lagging)"),
    (CURRENT_PERIOD, "Current Period"),
    (NEXT_PERIOD, "Next Period (Advance)"),
]
FRAMING_POLICIES = tuple(value for value, _ in FRAMING_POLICY_CHOICES)

# -------------------------
# Due date rules
# -------------------------
DAYS = "days"
WEEKS = "weeks"
MONTHS = "months"
OFFSET_TYPE_CHOICES = [(DAYS, "Days"), (WEEKS, "Weeks"), (MONTHS, "Months")]
OFFSET_TYPES = (DAYS, WEEKS, MONTHS)

PERIOD_START = "period_start"
PERIOD_END = "period_end"
ANCHOR_CHOICES = [(PERIOD_START, "Period Start"), (PERIOD_END, "Period End")]
ANCHORS = (PERIOD_START, PERIOD_END)


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Window:
    """A concrete [start, end) range realising one cycle."""
    start: date
    end: date
    # Requested day-of-month when the start had to be clamped
    clamped_from: int = field(default=None, compare=False)

    def contains(self, day):
        return self.start <= day < self.end


@dataclass(frozen=True)
class RecurrenceDefinition:
    frequency: str
    effective_start_date: date
    weekday: str = None
    start_day: int = None
    start_month: int = None
    effective_end_date: date = None

    @property
    def months_per_cycle(self):
        return MONTHS_PER_CYCLE.get(self.frequency)

    def validate(self):
        """
        Raise InvalidRecurrenceConfig when the anchor fields required by
        the frequency are missing or out of range.
        """
        if self.frequency not in FREQUENCIES:
            raise InvalidRecurrenceConfig(f"Unknown frequency: {self.frequency!r}")

        if not isinstance(self.effective_start_date, date):
            raise InvalidRecurrenceConfig("effective_start_date is required")

        if self.effective_end_date is not None and self.effective_end_date < self.effective_start_date:
            raise InvalidRecurrenceConfig("effective_end_date is before effective_start_date")

        if self.frequency == WEEKLY and self.weekday not in WEEKDAYS:
            raise InvalidRecurrenceConfig(f"Weekly recurrence needs a weekday, got {self.weekday!r}")

        if self.frequency in MONTHS_PER_CYCLE:
            if not _is_int(self.start_day) or not 1 <= self.start_day <= 31:
                raise InvalidRecurrenceConfig(
                    f"{self.frequency} recurrence needs a start day between 1 and 31, got {self.start_day!r}"
                )

        if self.frequency in (QUARTERLY, HALF_YEARLY, YEARLY):
            if not _is_int(self.start_month) or not 1 <= self.start_month <= 12:
                raise InvalidRecurrenceConfig(
                    f"{self.frequency} recurrence needs a start month between 1 and 12, got {self.start_month!r}"
                )
        return self


@dataclass(frozen=True)
class DueDateRule:
    """
    Either an offset from the period start/end, or a fixed exact date.
    exact_date wins whenever it is set.
    """
    offset_type: str = DAYS
    offset_value: int = 0
    anchored_to: str = PERIOD_END
    exact_date: date = None

    def validate(self):
        if self.exact_date is not None:
            return self
        if not _is_int(self.offset_value) or self.offset_value < 0:
            raise InvalidOffset(f"Offset must be a non-negative integer, got {self.offset_value!r}")
        if self.offset_type not in OFFSET_TYPES:
            raise InvalidOffset(f"Unknown offset type: {self.offset_type!r}")
        if self.anchored_to not in ANCHORS:
            raise InvalidOffset(f"Unknown offset anchor: {self.anchored_to!r}")
        return self


@dataclass(frozen=True)
class TaskRecurrenceOverride:
    """
    Per-task overrides. None means "inherit from the work"; frequency may
    also carry the explicit INHERIT marker.
    """
    task_template_id: object = None
    frequency: str = None
    weekday: str = None
    start_day: int = None
    start_month: int = None
    effective_start_date: date = None
    offset_type: str = None
    offset_value: int = None
    anchored_to: str = None
    exact_date: date = None

    @property
    def inherits_frequency(self):
        return self.frequency is None or self.frequency == INHERIT

    @property
    def has_offset(self):
        return self.offset_type is not None or self.offset_value is not None


@dataclass(frozen=True)
class EffectiveTaskConfig:
    """Fully resolved task configuration; nothing left to inherit."""
    task_template_id: object
    recurrence: RecurrenceDefinition
    due_rule: DueDateRule
    # Task specific start date; task cycles ending on or before it are skipped
    starts_on: date = None


@dataclass(frozen=True)
class TaskBlueprint:
    override: TaskRecurrenceOverride
    title: str
    description: str = ""
    priority: str = "medium"
    sort_order: int = 0
    assigned_to_id: int = None


@dataclass(frozen=True)
class RecurringWork:
    """Snapshot of a work item as the generation core sees it."""
    work_id: object
    title: str
    recurrence: RecurrenceDefinition
    framing_policy: str = PREVIOUS_PERIOD
    due_rule: DueDateRule = field(default_factory=DueDateRule)
    tasks: tuple = ()
    assigned_to_id: int = None
