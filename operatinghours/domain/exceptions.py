"""
Domain-specific exception hierarchy for the operating hours engine.
"""

from typing import Sequence


class OperatingHoursError(Exception):
    """Base class for all application-level errors."""


class IncompleteScheduleError(OperatingHoursError):
    """Raised when a weekly schedule is built from a mapping that lacks days."""

    def __init__(self, missing_days: Sequence[str]):
        self.missing_days = list(missing_days)
        super().__init__(f"Schedule is missing days: {', '.join(self.missing_days)}")


class UnknownDayError(OperatingHoursError, ValueError):
    """Raised when a day name is not one of the seven canonical weekdays."""


class InvalidScheduleError(OperatingHoursError):
    """Raised when an update is refused because the schedule does not validate."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class LocationNotFoundError(OperatingHoursError, LookupError):
    """Raised when the location store has no record for an id."""
