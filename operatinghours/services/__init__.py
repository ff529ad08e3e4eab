"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .location_hours import LocationHoursService, LocationStoreProtocol, OpeningStatus

__all__ = ["LocationHoursService", "LocationStoreProtocol", "OpeningStatus"]
