from works.scheduler.definitions import DAILY, HALF_YEARLY, MONTHLY, QUARTERLY, WEEKLY


def financial_year_label(start, start_month):
    # Calendar-year cycles are just named by the year
    fy_year = start.year if start.month >= start_month else start.year - 1
    if start_month == 1:
        return str(fy_year)
    return f"FY {fy_year}-{(fy_year + 1) % 100:02d}"


# function for the display name of a generated period
def build_period_name(recurrence, window):
    start = window.start
    frequency = recurrence.frequency

    if frequency == DAILY:
        return start.isoformat()

    if frequency == WEEKLY:
        return f"Week of {start:%b %d, %Y}"

    if frequency == MONTHLY:
        return f"{start:%b %Y}"

    start_month = recurrence.start_month or 1
    fy = financial_year_label(start, start_month)
    months_in = (start.month - start_month) % 12

    if frequency == QUARTERLY:
        return f"Q{months_in // 3 + 1} {fy}"

    if frequency == HALF_YEARLY:
        return f"H{months_in // 6 + 1} {fy}"

    # YEARLY
    return fy


def build_task_title(base_title, period_name, task_recurrence, task_window, repeated=False):
    """
    "<title> - <period>" for a task generated once per period; a task that
    repeats inside the period is labelled with its own cycle instead.
    """
    if repeated:
        return f"{base_title} - {build_period_name(task_recurrence, task_window)}"
    return f"{base_title} - {period_name}"
