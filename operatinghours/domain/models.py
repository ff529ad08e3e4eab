"""
Domain models for weekly operating hours.
"""

import re
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import IncompleteScheduleError, UnknownDayError

# Canonical order used for iteration, validation and serialization
DAYS: Tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Indexed by isoweekday() % 7 (Sunday=0 ... Saturday=6)
SUNDAY_FIRST_DAYS: Tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def is_valid_time_format(value: Any) -> bool:
    """Check that a value is an ``HH:MM`` 24-hour time string."""
    return isinstance(value, str) and TIME_PATTERN.fullmatch(value) is not None


def time_to_minutes(value: Any) -> Optional[int]:
    """
    Convert an ``HH:MM`` string to minutes since midnight.

    Parsing is lenient so that unvalidated schedules still give a
    deterministic answer: each part contributes its leading integer, an
    empty or missing part counts as zero. Returns None when a part has no
    leading integer at all.
    """
    if not isinstance(value, str):
        return None

    parts = value.split(":")
    hours_str = parts[0] or "0"
    minutes_str = (parts[1] if len(parts) > 1 else "") or "0"

    hours_match = _LEADING_INT.match(hours_str)
    minutes_match = _LEADING_INT.match(minutes_str)
    if hours_match is None or minutes_match is None:
        return None

    return int(hours_match.group(1)) * 60 + int(minutes_match.group(1))


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded ``HH:MM`` string."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def check_day(day: str) -> str:
    """Normalize a day name and make sure it is one of the canonical seven."""
    normalized = day.strip().lower() if isinstance(day, str) else day
    if normalized not in DAYS:
        raise UnknownDayError(
            f"Unknown day '{day}'. Expected one of: {', '.join(DAYS)}"
        )
    return normalized


@dataclass(frozen=True)
class DaySchedule:
    """
    One day's opening window.

    When ``closed`` is true the ``open`` and ``close`` values are ignored.
    A ``close`` earlier than ``open`` describes a window that runs past
    midnight into the next calendar day.
    """
    open: str
    close: str
    closed: bool = False

    @property
    def open_minutes(self) -> Optional[int]:
        return time_to_minutes(self.open)

    @property
    def close_minutes(self) -> Optional[int]:
        return time_to_minutes(self.close)

    @property
    def crosses_midnight(self) -> bool:
        """True for an open day whose closing time is not after its opening time."""
        open_minutes = self.open_minutes
        close_minutes = self.close_minutes
        if self.closed or open_minutes is None or close_minutes is None:
            return False
        return open_minutes >= close_minutes

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DaySchedule":
        return cls(
            open=data.get("open", ""),
            close=data.get("close", ""),
            closed=bool(data.get("closed")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        if self.closed:
            return "closed"
        return f"{self.open} - {self.close}"


@dataclass(frozen=True)
class OperatingHours:
    """
    A full week of opening windows, one ``DaySchedule`` per weekday.

    Instances are immutable; ``replace_day`` and ``patch_day`` return new
    values and leave the original untouched.
    """
    monday: DaySchedule
    tuesday: DaySchedule
    wednesday: DaySchedule
    thursday: DaySchedule
    friday: DaySchedule
    saturday: DaySchedule
    sunday: DaySchedule

    @classmethod
    def default(cls) -> "OperatingHours":
        """
        The fallback schedule used when a location supplies none.

        Monday to Friday 09:00-22:00, Saturday 10:00-22:00,
        Sunday 10:00-21:00.
        """
        weekday = DaySchedule(open="09:00", close="22:00", closed=False)
        return cls(
            monday=weekday,
            tuesday=weekday,
            wednesday=weekday,
            thursday=weekday,
            friday=weekday,
            saturday=DaySchedule(open="10:00", close="22:00", closed=False),
            sunday=DaySchedule(open="10:00", close="21:00", closed=False),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "OperatingHours":
        """
        Build a schedule from its wire form.

        Args:
            data: Mapping of day name to ``{open, close, closed}``

        Returns:
            OperatingHours instance (time strings are not validated)

        Raises:
            IncompleteScheduleError: If any of the seven days is missing
        """
        missing = [
            day for day in DAYS
            if not isinstance(data.get(day), Mapping)
        ]
        if missing:
            raise IncompleteScheduleError(missing)

        return cls(**{day: DaySchedule.from_mapping(data[day]) for day in DAYS})

    def for_day(self, day: str) -> DaySchedule:
        """Get the schedule of a canonical day name."""
        return getattr(self, check_day(day))

    def replace_day(self, day: str, day_schedule: DaySchedule) -> "OperatingHours":
        """Return a copy with one day's schedule swapped out."""
        return replace(self, **{check_day(day): day_schedule})

    def patch_day(
        self,
        day: str,
        open: Optional[str] = None,
        close: Optional[str] = None,
        closed: Optional[bool] = None,
    ) -> "OperatingHours":
        """
        Return a copy with selected fields of one day changed.

        Fields passed as None keep their current value.
        """
        current = self.for_day(day)
        changes: Dict[str, Any] = {}
        if open is not None:
            changes["open"] = open
        if close is not None:
            changes["close"] = close
        if closed is not None:
            changes["closed"] = bool(closed)

        return self.replace_day(day, replace(current, **changes))

    def items(self) -> List[Tuple[str, DaySchedule]]:
        """Day name and schedule pairs in canonical order."""
        return [(f.name, getattr(self, f.name)) for f in fields(self)]

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {day: day_schedule.to_dict() for day, day_schedule in self.items()}


@dataclass
class ValidationResult:
    """
    Outcome of validating a weekly schedule.

    Every problem found is listed; the result is valid only when there
    are none.
    """
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {"isValid": self.is_valid, "errors": list(self.errors)}
