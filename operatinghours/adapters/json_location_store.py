"""
JSON file backed location store.

Stands in for the persistence layer that owns location records and their
embedded operating hours.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..domain.exceptions import LocationNotFoundError
from ..domain.models import OperatingHours

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_locations.json"


@dataclass
class LocationRecord:
    """A location as stored, with its schedule still in wire form."""
    id: str
    name: str = ""
    address: str = ""
    operating_hours: Optional[Dict[str, Any]] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name, "address": self.address}
        if self.operating_hours is not None:
            data["operatingHours"] = self.operating_hours
        return data


class JsonLocationStore:
    """
    Location store that keeps every record in a single JSON file.

    Expected layout::

        {"locations": [{"id": "...", "name": "...", "address": "...",
                        "operatingHours": {"monday": {...}, ...}}]}

    The file is read on construction and rewritten on every save.
    """

    def __init__(self, data_file: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            data_file: Path to the JSON file. Defaults to the bundled sample data.
        """
        self.data_file = Path(data_file) if data_file else SAMPLE_DATA_FILE
        self._locations: Dict[str, LocationRecord] = self._load()

    def _load(self) -> Dict[str, LocationRecord]:
        """Load location records from the JSON file."""
        if not self.data_file.exists():
            logger.warning("Location data file %s not found, starting empty", self.data_file)
            return {}

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        entries = data.get("locations", []) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise ValueError(f"{self.data_file} must contain a list of locations")

        locations: Dict[str, LocationRecord] = {}
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("id"):
                logger.warning("Skipping location entry without id: %r", entry)
                continue

            hours = entry.get("operatingHours")
            if hours is not None and not isinstance(hours, dict):
                logger.warning(
                    "Ignoring malformed operatingHours for location %s", entry["id"]
                )
                hours = None

            location_id = str(entry["id"])
            locations[location_id] = LocationRecord(
                id=location_id,
                name=entry.get("name", ""),
                address=entry.get("address", ""),
                operating_hours=hours,
            )

        logger.debug("Loaded %d locations from %s", len(locations), self.data_file)
        return locations

    def _write(self) -> None:
        payload = {"locations": [record.to_dict() for record in self._locations.values()]}
        with open(self.data_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")

    def _get_record(self, location_id: str) -> LocationRecord:
        record = self._locations.get(str(location_id))
        if record is None:
            raise LocationNotFoundError(f"Location not found: {location_id}")
        return record

    async def get_location(self, location_id: str) -> LocationRecord:
        return self._get_record(location_id)

    async def get_operating_hours(self, location_id: str) -> Optional[Mapping[str, Any]]:
        """
        Get the stored schedule of a location.

        Returns:
            Raw day-keyed mapping, or None if the location has no schedule

        Raises:
            LocationNotFoundError: If the location does not exist
        """
        return self._get_record(location_id).operating_hours

    async def save_operating_hours(self, location_id: str, hours: OperatingHours) -> None:
        """Replace a location's schedule and persist the file."""
        record = self._get_record(location_id)
        record.operating_hours = hours.to_dict()
        self._write()

        logger.info("Saved operating hours for location %s", location_id)

    async def list_locations(self) -> List[LocationRecord]:
        return list(self._locations.values())
