from .definitions import CURRENT_PERIOD, FRAMING_POLICIES, NEXT_PERIOD, PREVIOUS_PERIOD
from .errors import UnresolvedPeriod
from .recurrence import compute_cycle_boundaries, shift_window, window_containing

POLICY_STEPS = {
    PREVIOUS_PERIOD: -1,
    CURRENT_PERIOD: 0,
    NEXT_PERIOD: 1,
}


def select_framed_period(windows, reference_date, policy):
    """
    Pick exactly one window out of an ordered window sequence.

    current_period is the window with start <= reference_date < end;
    previous_period / next_period are its direct neighbours in the
    sequence. Anything that falls outside the sequence is unresolved.
    """
    if policy not in POLICY_STEPS:
        raise ValueError(f"Unknown framing policy: {policy!r}")

    windows = list(windows)
    if not windows or reference_date < windows[0].start:
        raise UnresolvedPeriod(f"No cycle window covers {reference_date.isoformat()}")

    for index, window in enumerate(windows):
        if window.contains(reference_date):
            break
    else:
        raise UnresolvedPeriod(f"No cycle window covers {reference_date.isoformat()}")

    target = index + POLICY_STEPS[policy]
    if not 0 <= target < len(windows):
        raise UnresolvedPeriod(
            f"{policy} of {reference_date.isoformat()} falls outside the recurrence range"
        )
    return windows[target]


def frame_period(recurrence, reference_date, policy):
    """
    Resolve the framed window for a recurrence definition.

    The reference date must not precede the effective start date. The
    window before the current one stays reachable for lagging work even
    when it opens before the effective start date; windows opening after
    the effective end date are never returned.
    """
    recurrence.validate()
    if policy not in FRAMING_POLICIES:
        raise ValueError(f"Unknown framing policy: {policy!r}")
    if reference_date < recurrence.effective_start_date:
        raise UnresolvedPeriod(
            f"Reference date {reference_date.isoformat()} is before the effective start "
            f"{recurrence.effective_start_date.isoformat()}"
        )

    current = window_containing(recurrence, reference_date)
    previous = shift_window(recurrence, current, -1)
    windows = compute_cycle_boundaries(recurrence, previous.start, 3)
    return select_framed_period(windows, reference_date, policy)
