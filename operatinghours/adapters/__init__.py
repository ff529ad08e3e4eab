"""
Adapters layer - External collaborators (location storage).
"""

from .json_location_store import JsonLocationStore, LocationRecord

__all__ = ["JsonLocationStore", "LocationRecord"]
