"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    IncompleteScheduleError,
    InvalidScheduleError,
    LocationNotFoundError,
    OperatingHoursError,
    UnknownDayError,
)
from .models import DAYS, DaySchedule, OperatingHours, ValidationResult
from .schedule_engine import ScheduleEngine

__all__ = [
    "DAYS",
    "DaySchedule",
    "OperatingHours",
    "ValidationResult",
    "ScheduleEngine",
    "OperatingHoursError",
    "IncompleteScheduleError",
    "InvalidScheduleError",
    "LocationNotFoundError",
    "UnknownDayError",
]
