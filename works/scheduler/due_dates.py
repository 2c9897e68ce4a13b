from datetime import timedelta

from .definitions import DAYS, PERIOD_START, WEEKS
from .errors import ClampedDateWarning
from .recurrence import add_months_safe


def resolve_due_date(window, rule, warnings=None):
    """
    Concrete due date for a window under a due date rule.

    exact_date is returned unchanged, independent of the window. Offsets
    shift the window start or (exclusive) end: days and weeks by calendar
    days, months by calendar months with the day clamped to the month
    length. Clamps are appended to `warnings` when a list is given.
    """
    rule.validate()
    if rule.exact_date is not None:
        return rule.exact_date

    anchor = window.start if rule.anchored_to == PERIOD_START else window.end

    if rule.offset_type == DAYS:
        return anchor + timedelta(days=rule.offset_value)
    if rule.offset_type == WEEKS:
        return anchor + timedelta(days=7 * rule.offset_value)
    # MONTHS
    due = add_months_safe(anchor, rule.offset_value)
    if due.day != anchor.day and warnings is not None:
        warnings.append(ClampedDateWarning(anchor.day, due))
    return due
