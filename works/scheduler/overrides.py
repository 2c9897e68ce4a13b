from .definitions import DueDateRule, EffectiveTaskConfig, RecurrenceDefinition


def _pick(task_value, parent_value):
    return parent_value if task_value is None else task_value


def merge_recurrence(parent, override):
    frequency = parent.frequency if override.inherits_frequency else override.frequency
    return RecurrenceDefinition(
        frequency=frequency,
        effective_start_date=_pick(override.effective_start_date, parent.effective_start_date),
        weekday=_pick(override.weekday, parent.weekday),
        start_day=_pick(override.start_day, parent.start_day),
        start_month=_pick(override.start_month, parent.start_month),
        effective_end_date=parent.effective_end_date,
    )


def merge_due_rule(parent, override):
    """
    An exact date on the task wins outright. Offset fields on the task
    replace the parent's field by field and drop any parent exact date.
    With nothing set on the task the parent rule is used as is.
    """
    if override.exact_date is not None:
        return DueDateRule(
            offset_type=parent.offset_type,
            offset_value=parent.offset_value,
            anchored_to=parent.anchored_to,
            exact_date=override.exact_date,
        )

    if override.has_offset or override.anchored_to is not None:
        return DueDateRule(
            offset_type=_pick(override.offset_type, parent.offset_type),
            offset_value=_pick(override.offset_value, parent.offset_value),
            anchored_to=_pick(override.anchored_to, parent.anchored_to),
            exact_date=None,
        )

    return parent


def merge(parent_recurrence, parent_due_rule, task_override):
    """
    Resolve a task override against the work defaults.

    Unset task fields fall back to the work's; set ones always win. The
    returned config is validated and needs no further inheritance lookups.
    """
    recurrence = merge_recurrence(parent_recurrence, task_override).validate()
    due_rule = merge_due_rule(parent_due_rule, task_override).validate()
    return EffectiveTaskConfig(
        task_template_id=task_override.task_template_id,
        recurrence=recurrence,
        due_rule=due_rule,
        starts_on=task_override.effective_start_date,
    )
