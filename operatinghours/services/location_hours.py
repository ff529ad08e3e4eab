"""
Application services for location operating hours.

The service coordinates fetching a location's schedule via a store adapter
and delegates every open/closed decision to the domain-level
``ScheduleEngine``. Stored schedules are untrusted input: they are always
sanitized before use and validated before anything is written back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Protocol

from pendulum import DateTime

from ..domain.exceptions import InvalidScheduleError
from ..domain.models import OperatingHours, check_day
from ..domain.schedule_engine import ScheduleEngine

logger = logging.getLogger(__name__)


class LocationStoreProtocol(Protocol):
    """Protocol describing the location store behaviour needed by the service."""

    async def get_operating_hours(self, location_id: str) -> Optional[Mapping[str, Any]]:
        """Return the raw stored schedule, or None if the location has none."""

    async def save_operating_hours(self, location_id: str, hours: OperatingHours) -> None:
        """Persist a new schedule for the location."""

    async def list_locations(self) -> List[Any]:
        """Return every stored location record."""


@dataclass(frozen=True)
class OpeningStatus:
    """Open/closed state of a location at one instant."""
    location_id: str
    checked_at: datetime
    is_open: bool
    next_opening: Optional[DateTime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "locationId": self.location_id,
            "checkedAt": self.checked_at.isoformat(),
            "isOpen": self.is_open,
            "nextOpening": self.next_opening.isoformat() if self.next_opening else None,
        }


class LocationHoursService:
    """
    Answers operating hours questions for stored locations.

    Dependency inversion toward a protocol makes it easy to plug in the JSON
    store or a stub in tests.
    """

    def __init__(
        self,
        store: LocationStoreProtocol,
        engine: Optional[ScheduleEngine] = None,
    ) -> None:
        self._store = store
        self._engine = engine or ScheduleEngine()

    @property
    def engine(self) -> ScheduleEngine:
        return self._engine

    async def list_locations(self) -> List[Any]:
        """All locations known to the store."""
        return await self._store.list_locations()

    async def get_operating_hours(self, location_id: str) -> OperatingHours:
        """
        Fetch a location's schedule, normalized against the default.

        Locations without a stored schedule get the default schedule.
        """
        raw = await self._store.get_operating_hours(location_id)
        if raw is None:
            logger.debug("Location %s has no stored schedule, using default", location_id)

        return self._engine.sanitize(raw)

    async def is_open(self, location_id: str, at: Optional[datetime] = None) -> bool:
        """Check whether a location is open at ``at`` (defaults to now)."""
        hours = await self.get_operating_hours(location_id)
        instant = at if at is not None else self._engine.clock()
        return self._engine.is_open_at(hours, instant)

    async def next_opening(
        self,
        location_id: str,
        from_instant: Optional[datetime] = None,
    ) -> Optional[DateTime]:
        """Find when a location next opens, or None if it stays closed all week."""
        hours = await self.get_operating_hours(location_id)
        return self._engine.get_next_opening_time(hours, from_instant)

    async def get_status(self, location_id: str, at: Optional[datetime] = None) -> OpeningStatus:
        """
        Combine the open/closed answer with the next opening time.

        The next opening is only looked up while the location is closed.
        """
        hours = await self.get_operating_hours(location_id)
        instant = at if at is not None else self._engine.clock()

        is_open = self._engine.is_open_at(hours, instant)
        next_opening = None if is_open else self._engine.get_next_opening_time(hours, instant)

        logger.debug(
            "Status for location %s at %s: open=%s next=%s",
            location_id,
            instant,
            is_open,
            next_opening,
        )
        return OpeningStatus(
            location_id=location_id,
            checked_at=instant,
            is_open=is_open,
            next_opening=next_opening,
        )

    async def replace_operating_hours(
        self,
        location_id: str,
        data: Mapping[str, Any],
    ) -> OperatingHours:
        """
        Replace a location's whole schedule.

        Args:
            location_id: Location to update
            data: Raw (possibly partial) day-keyed schedule

        Returns:
            The schedule that was saved

        Raises:
            InvalidScheduleError: If the sanitized schedule does not validate
        """
        hours = self._engine.sanitize(data)
        self._ensure_valid(self._engine.validate(hours).errors, location_id)

        await self._store.save_operating_hours(location_id, hours)
        return hours

    async def patch_day(
        self,
        location_id: str,
        day: str,
        *,
        open: Optional[str] = None,
        close: Optional[str] = None,
        closed: Optional[bool] = None,
    ) -> OperatingHours:
        """
        Change selected fields of one day and save the result.

        Raises:
            UnknownDayError: If ``day`` is not a weekday name
            InvalidScheduleError: If the patched day does not validate
        """
        day_name = check_day(day)
        current = await self.get_operating_hours(location_id)
        updated = current.patch_day(day_name, open=open, close=close, closed=closed)

        errors = self._engine.validate_day_schedule(updated.for_day(day_name), day_name)
        self._ensure_valid(errors, location_id)

        await self._store.save_operating_hours(location_id, updated)
        return updated

    @staticmethod
    def _ensure_valid(errors: List[str], location_id: str) -> None:
        if errors:
            logger.warning(
                "Rejected operating hours update for location %s: %s",
                location_id,
                "; ".join(errors),
            )
            raise InvalidScheduleError(errors)
