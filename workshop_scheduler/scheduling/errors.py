"""Domain-specific errors for the scheduling engine.

Planning operations (toggle, auto-assign, attach/detach) never raise; these
errors cover malformed input at the edges and persistence failures.
"""


class SchedulerError(Exception):
    """Base exception for all scheduler errors."""

    pass


class InvalidDateError(SchedulerError, ValueError):
    """Raised when a value cannot be parsed as an ISO calendar date."""

    pass


class PersistenceError(SchedulerError):
    """Raised when a blob store read or write fails."""

    pass


class SnapshotError(SchedulerError):
    """Raised when a stored planning snapshot cannot be decoded."""

    pass
