from .errors import InvalidStatusTransition

PENDING = "pending"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
CANCELLED = "cancelled"

STATUS_CHOICES = [
    (PENDING, "Pending"),
    (IN_PROGRESS, "In Progress"),
    (COMPLETED, "Completed"),
    (CANCELLED, "Cancelled"),
]

# completed and cancelled are terminal
ALLOWED_TRANSITIONS = {
    PENDING: {IN_PROGRESS, CANCELLED},
    IN_PROGRESS: {COMPLETED},
    COMPLETED: set(),
    CANCELLED: set(),
}


def can_transition(current, new):
    return new in ALLOWED_TRANSITIONS.get(current, set())


def check_transition(current, new):
    if not can_transition(current, new):
        raise InvalidStatusTransition(f"Cannot move from {current!r} to {new!r}")
    return new
