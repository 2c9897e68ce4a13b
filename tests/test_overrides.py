from datetime import date

import pytest

from works.scheduler.definitions import (
    INHERIT,
    DueDateRule,
    RecurrenceDefinition,
    TaskRecurrenceOverride,
)
from works.scheduler.errors import InvalidOffset, InvalidRecurrenceConfig
from works.scheduler.overrides import merge

PARENT = RecurrenceDefinition("quarterly", date(2025, 4, 1), start_day=1, start_month=4)
PARENT_RULE = DueDateRule(offset_type="days", offset_value=10, anchored_to="period_end")


@pytest.mark.parametrize("frequency", [None, INHERIT])
def test_unset_frequency_inherits_the_parent(frequency):
    config = merge(PARENT, PARENT_RULE, TaskRecurrenceOverride(task_template_id=3, frequency=frequency))

    assert config.task_template_id == 3
    assert config.recurrence == PARENT
    assert config.due_rule == PARENT_RULE
    assert config.starts_on is None


def test_task_fields_win_and_the_rest_is_inherited():
    override = TaskRecurrenceOverride(frequency="monthly", start_day=15)

    config = merge(PARENT, PARENT_RULE, override)

    assert config.recurrence.frequency == "monthly"
    assert config.recurrence.start_day == 15
    assert config.recurrence.start_month == 4
    assert config.recurrence.effective_start_date == date(2025, 4, 1)


def test_task_start_date():
    config = merge(PARENT, PARENT_RULE, TaskRecurrenceOverride(effective_start_date=date(2025, 6, 1)))

    assert config.recurrence.effective_start_date == date(2025, 6, 1)
    assert config.starts_on == date(2025, 6, 1)


def test_effective_end_date_always_comes_from_the_parent():
    parent = RecurrenceDefinition(
        "monthly", date(2025, 1, 1), start_day=1, effective_end_date=date(2025, 12, 31)
    )
    config = merge(parent, PARENT_RULE, TaskRecurrenceOverride(frequency="weekly", weekday="friday"))
    assert config.recurrence.effective_end_date == date(2025, 12, 31)


def test_offset_fields_merge_field_by_field():
    config = merge(PARENT, PARENT_RULE, TaskRecurrenceOverride(offset_value=5))
    assert config.due_rule == DueDateRule(offset_type="days", offset_value=5, anchored_to="period_end")


def test_task_offset_drops_parent_exact_date():
    parent_rule = DueDateRule(offset_type="days", offset_value=10, exact_date=date(2025, 7, 31))

    config = merge(PARENT, parent_rule, TaskRecurrenceOverride(anchored_to="period_start"))

    assert config.due_rule.exact_date is None
    assert config.due_rule.anchored_to == "period_start"
    assert config.due_rule.offset_value == 10


def test_task_exact_date_wins():
    config = merge(PARENT, PARENT_RULE, TaskRecurrenceOverride(offset_value=3, exact_date=date(2025, 9, 30)))
    assert config.due_rule.exact_date == date(2025, 9, 30)


def test_merge_is_idempotent():
    override = TaskRecurrenceOverride(task_template_id=8, frequency="monthly", start_day=20, offset_value=2)

    config = merge(PARENT, PARENT_RULE, override)

    assert merge(config.recurrence, config.due_rule, override) == config
    assert merge(config.recurrence, config.due_rule, TaskRecurrenceOverride(task_template_id=8)) == config


def test_merged_recurrence_is_validated():
    with pytest.raises(InvalidRecurrenceConfig):
        merge(PARENT, PARENT_RULE, TaskRecurrenceOverride(frequency="weekly"))


def test_merged_due_rule_is_validated():
    with pytest.raises(InvalidOffset):
        merge(PARENT, PARENT_RULE, TaskRecurrenceOverride(offset_value=-1))
