from datetime import date, timedelta
from dateutil.relativedelta import relativedelta

from .definitions import DAILY, WEEKLY, WEEKDAYS, Window


def add_months_safe(base_date, months, day=None):
    """
    Adds months while safely handling end-of-month cases.
    `day` pins the wanted day-of-month (defaults to the base date's day);
    months that are too short get their last day instead.
    """
    return base_date + relativedelta(months=months, day=day or base_date.day)


def _month_index(dt):
    return dt.year * 12 + dt.month - 1


def _cycle_start_for_month(recurrence, month_index):
    year, month = divmod(month_index, 12)
    return add_months_safe(date(year, month + 1, 1), 0, day=recurrence.start_day)


def _month_window(recurrence, month_index):
    start = _cycle_start_for_month(recurrence, month_index)
    end = _cycle_start_for_month(recurrence, month_index + recurrence.months_per_cycle)
    clamped_from = recurrence.start_day if start.day != recurrence.start_day else None
    return Window(start, end, clamped_from)


def window_containing(recurrence, day):
    """
    Return the cycle window with start <= day < end.
    Boundary dates belong to the window they open.
    """
    if recurrence.frequency == DAILY:
        return Window(day, day + timedelta(days=1))

    if recurrence.frequency == WEEKLY:
        target = WEEKDAYS.index(recurrence.weekday)
        start = day - timedelta(days=(day.weekday() - target) % 7)
        return Window(start, start + timedelta(days=7))

    # Month based: cycles are aligned on start_month within the year
    cycle = recurrence.months_per_cycle
    alignment = (recurrence.start_month or 1) - 1
    index = _month_index(day)
    index -= (index - alignment) % cycle
    if _cycle_start_for_month(recurrence, index) > day:
        index -= cycle
    return _month_window(recurrence, index)


def shift_window(recurrence, window, steps):
    """Move an aligned window by `steps` whole cycles (negative = earlier)."""
    if recurrence.frequency == DAILY:
        start = window.start + timedelta(days=steps)
        return Window(start, start + timedelta(days=1))

    if recurrence.frequency == WEEKLY:
        start = window.start + timedelta(weeks=steps)
        return Window(start, start + timedelta(days=7))

    # A clamped start never leaves its month, so the month index is stable
    return _month_window(recurrence, _month_index(window.start) + steps * recurrence.months_per_cycle)


class CycleWindows:
    """
    Ordered, non-overlapping cycle windows for a recurrence definition.

    Lazy, finite and restartable: the first window is the one containing
    `from_date`, at most `count` windows are produced, and no window
    starting after the effective end date is produced. Every iteration
    starts again from the first window.
    """

    def __init__(self, recurrence, from_date, count):
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f"count must be a non-negative integer, got {count!r}")
        self.recurrence = recurrence.validate()
        self.from_date = from_date
        self.count = count

    def __iter__(self):
        end_date = self.recurrence.effective_end_date
        window = window_containing(self.recurrence, self.from_date)
        for _ in range(self.count):
            if end_date is not None and window.start > end_date:
                return
            yield window
            window = shift_window(self.recurrence, window, 1)

    def __repr__(self):
        return (
            f"CycleWindows({self.recurrence.frequency}, from={self.from_date.isoformat()}, "
            f"count={self.count})"
        )


def compute_cycle_boundaries(recurrence, from_date, count):
    return CycleWindows(recurrence, from_date, count)


def windows_starting_between(recurrence, start, end):
    """
    Windows of `recurrence` whose start falls inside [start, end).
    Used to lay task cycles over one framed work window.
    """
    recurrence.validate()
    window = window_containing(recurrence, start)
    if window.start < start:
        window = shift_window(recurrence, window, 1)

    windows = []
    end_date = recurrence.effective_end_date
    while window.start < end:
        if end_date is not None and window.start > end_date:
            break
        windows.append(window)
        window = shift_window(recurrence, window, 1)
    return windows
