"""Exceptions raised by weekplanner.

Only input contract violations raise. An unsatisfiable placement is a normal
outcome and is reported through ``GeneratedSchedule.conflicts`` instead.
"""


class SchedulingError(Exception):
    """Base class for all weekplanner errors."""

    pass


class InvalidInputError(SchedulingError, ValueError):
    """Raised when caller-supplied input breaks the input contract."""

    pass


class InvalidTimeError(InvalidInputError):
    """Raised when a time string is not in 12-hour "h:mm AM/PM" format."""

    pass


class InvalidDayError(InvalidInputError):
    """Raised when a day name is not one of Monday through Saturday."""

    pass


class InvalidTimeSlotError(InvalidInputError):
    """Raised when a time slot does not end strictly after it starts."""

    pass


class InvalidDependencyError(InvalidInputError):
    """Raised when a dependency has a missing code or a bad slot index."""

    pass


class InvalidActivityError(InvalidInputError):
    """Raised when an activity code is empty or an activity is malformed."""

    pass


class DuplicateActivityError(InvalidInputError):
    """Raised when two activities share a code (case-insensitive)."""


class DuplicateDependencyError(InvalidInputError):
    """Raised when the exact same dependency is added twice."""


class ActivityNotFoundError(SchedulingError, KeyError):
    """Raised when a catalog lookup names an unknown activity."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
