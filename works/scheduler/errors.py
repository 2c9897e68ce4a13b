class RecurrenceError(Exception):
    """
    Base error for the period generation core.
    Every error renders to the structured {kind, message} value handed
    back to callers.
    """
    kind = "RecurrenceError"

    def __init__(self, message=""):
        super().__init__(message)
        self.message = message

    def as_dict(self):
        return {"kind": self.kind, "message": self.message}


class InvalidRecurrenceConfig(RecurrenceError, ValueError):
    kind = "InvalidRecurrenceConfig"


class InvalidOffset(RecurrenceError, ValueError):
    kind = "InvalidOffset"


class UnresolvedPeriod(RecurrenceError):
    kind = "UnresolvedPeriod"


class DuplicatePeriod(RecurrenceError):
    # Benign: the period already exists for this work.
    kind = "DuplicatePeriod"


class BatchInsertFailed(RecurrenceError):
    kind = "BatchInsertFailed"


class StoreUnavailable(RecurrenceError):
    # Transient store failure (timeout, dropped connection).
    kind = "StoreUnavailable"


class InvalidStatusTransition(RecurrenceError, ValueError):
    kind = "InvalidStatusTransition"


class ClampedDateWarning(UserWarning):
    """
    Informational only. Returned alongside a successful result when a
    day-of-month was pulled back to the last day of a shorter month.
    """

    def __init__(self, requested_day, actual):
        self.requested_day = requested_day
        self.actual = actual
        super().__init__(
            f"Day {requested_day} does not exist in {actual:%b %Y}; used {actual.isoformat()}"
        )

    def __eq__(self, other):
        return (
            isinstance(other, ClampedDateWarning)
            and self.requested_day == other.requested_day
            and self.actual == other.actual
        )

    def __hash__(self):
        return hash((self.requested_day, self.actual))

    def as_dict(self):
        return {"kind": "ClampedDateWarning", "message": str(self)}
