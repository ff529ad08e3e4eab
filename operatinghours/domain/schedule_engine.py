"""
Core business logic for answering operating hours queries.

This is the heart of the application - pure domain logic without any
external dependencies (no storage, no network, no I/O). The only notion
of "now" comes from the injected clock.
"""

from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Union

import pendulum
from pendulum import DateTime

from .models import (
    DAYS,
    MINUTES_PER_DAY,
    SUNDAY_FIRST_DAYS,
    DaySchedule,
    OperatingHours,
    ValidationResult,
    is_valid_time_format,
    time_to_minutes,
)

Clock = Callable[[], datetime]
ScheduleInput = Union[OperatingHours, Mapping[str, Any]]

# How many calendar days (today included) the next-opening search looks at
SEARCH_WINDOW_DAYS = 7


def _field(entry: Any, name: str) -> Any:
    """Read one field from a raw day entry, tolerating non-mapping junk."""
    if isinstance(entry, DaySchedule):
        return getattr(entry, name)
    if isinstance(entry, Mapping):
        return entry.get(name)
    return None


def _is_missing(entry: Any) -> bool:
    """An absent or empty-valued day entry. An empty mapping still counts as present."""
    if isinstance(entry, (Mapping, DaySchedule)):
        return False
    return not entry


def _as_mapping(schedule: Any) -> Mapping[str, Any]:
    if isinstance(schedule, OperatingHours):
        return schedule.to_dict()
    if isinstance(schedule, Mapping):
        return schedule
    return {}


def weekday_name(instant: datetime) -> str:
    """Canonical day name of an instant (Sunday=0 ... Saturday=6 lookup)."""
    return SUNDAY_FIRST_DAYS[instant.isoweekday() % 7]


class ScheduleEngine:
    """
    Validates, normalizes and queries weekly operating hours.

    Algorithm overview:
    1. ``validate`` reports every structural problem of a raw schedule
    2. ``sanitize`` overlays partial input onto the default schedule
    3. ``is_open_at`` checks one instant against that weekday's window,
       treating ``close <= open`` as a window that runs past midnight
    4. ``get_next_opening_time`` scans forward a week for the first
       opening strictly after the starting instant

    The engine keeps no state besides its clock, so a single instance can
    be shared freely.
    """

    def __init__(self, clock: Clock = pendulum.now):
        self.clock = clock

    def validate_day_schedule(self, day_schedule: Any, day_name: str) -> List[str]:
        """
        Validate a single day's entry.

        Closed days are never checked. Equal opening and closing times are
        only reported when both times are well-formed.
        """
        errors: List[str] = []

        if _field(day_schedule, "closed"):
            return errors

        open_time = _field(day_schedule, "open")
        close_time = _field(day_schedule, "close")
        open_valid = is_valid_time_format(open_time)
        close_valid = is_valid_time_format(close_time)

        if not open_valid:
            errors.append(f"{day_name}: Invalid opening time format. Use HH:MM (24-hour format)")

        if not close_valid:
            errors.append(f"{day_name}: Invalid closing time format. Use HH:MM (24-hour format)")

        # close < open is allowed (window crosses midnight), equal is not
        if open_valid and close_valid and time_to_minutes(open_time) == time_to_minutes(close_time):
            errors.append(f"{day_name}: Opening and closing times cannot be the same")

        return errors

    def validate(self, schedule: ScheduleInput) -> ValidationResult:
        """
        Validate a complete weekly schedule.

        Args:
            schedule: Raw day-keyed mapping or an OperatingHours value

        Returns:
            ValidationResult listing every problem, monday first
        """
        data = _as_mapping(schedule)
        errors: List[str] = []

        for day in DAYS:
            day_schedule = data.get(day)
            if _is_missing(day_schedule):
                errors.append(f"Missing schedule for {day}")
                continue

            errors.extend(self.validate_day_schedule(day_schedule, day))

        return ValidationResult(errors=errors)

    def sanitize(self, partial: Optional[ScheduleInput]) -> OperatingHours:
        """
        Overlay partial input onto the default schedule.

        Never fails and never rejects anything: a provided ``open`` or
        ``close`` replaces the default only when truthy, ``closed`` is
        always taken from the input, and days not provided keep their
        default. Malformed times pass through for ``validate`` to report.
        """
        data = _as_mapping(partial)
        result = OperatingHours.default()

        for day in DAYS:
            day_input = data.get(day)
            if _is_missing(day_input):
                continue

            default_day = result.for_day(day)
            result = result.replace_day(
                day,
                DaySchedule(
                    open=_field(day_input, "open") or default_day.open,
                    close=_field(day_input, "close") or default_day.close,
                    closed=bool(_field(day_input, "closed")),
                ),
            )

        return result

    def is_open_at(self, schedule: OperatingHours, instant: datetime) -> bool:
        """
        Check whether the schedule is open at a given wall-clock instant.

        A day marked closed is never open, even during what would be the
        spill-over of the previous day's overnight window. Both ends of a
        window are inclusive and seconds are ignored.
        """
        day_schedule = schedule.for_day(weekday_name(instant))

        if day_schedule.closed:
            return False

        current_minutes = instant.hour * 60 + instant.minute
        open_minutes = day_schedule.open_minutes
        close_minutes = day_schedule.close_minutes

        # A time without any digits never opens the day
        if open_minutes is None or close_minutes is None:
            return False

        # Normal hours, e.g. 09:00 - 22:00
        if open_minutes < close_minutes:
            return open_minutes <= current_minutes <= close_minutes

        # Hours crossing midnight, e.g. 22:00 - 02:00
        return current_minutes >= open_minutes or current_minutes <= close_minutes

    def is_currently_open(self, schedule: OperatingHours) -> bool:
        """Check the schedule against the engine's clock."""
        return self.is_open_at(schedule, self.clock())

    def get_next_opening_time(
        self,
        schedule: OperatingHours,
        from_instant: Optional[datetime] = None,
    ) -> Optional[DateTime]:
        """
        Find the next opening strictly after an instant.

        Args:
            schedule: Complete weekly schedule
            from_instant: Start of the search, defaults to the clock's now

        Returns:
            Opening instant in the same timezone as ``from_instant``, or
            None when no day in the coming week opens
        """
        start = self._to_pendulum(from_instant if from_instant is not None else self.clock())

        for offset in range(SEARCH_WINDOW_DAYS):
            check_date = start.add(days=offset)
            day_schedule = schedule.for_day(weekday_name(check_date))

            if day_schedule.closed:
                continue

            open_minutes = day_schedule.open_minutes
            # No usable opening time, the day cannot open
            if open_minutes is None:
                continue

            opening_time = self._at_minutes(check_date, open_minutes)

            # Today's opening only counts if it is still ahead of us
            if offset == 0 and opening_time <= start:
                continue

            return opening_time

        return None

    @staticmethod
    def _to_pendulum(instant: datetime) -> DateTime:
        if isinstance(instant, DateTime):
            return instant
        # Keep naive instants naive: the engine never picks a timezone
        return pendulum.instance(instant, tz=instant.tzinfo)

    @staticmethod
    def _at_minutes(date: DateTime, minutes: int) -> DateTime:
        """
        Set a date's wall-clock time from minutes since midnight.

        Values outside a single day roll over into neighbouring days.
        """
        day_shift, minute_of_day = divmod(minutes, MINUTES_PER_DAY)
        if day_shift:
            date = date.add(days=day_shift)

        hour, minute = divmod(minute_of_day, 60)
        return date.set(hour=hour, minute=minute, second=0, microsecond=0)
