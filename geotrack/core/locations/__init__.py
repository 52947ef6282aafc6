"""
Журнал локаций.
"""

from geotrack.core.locations.store import LocationStore

__all__ = ["LocationStore"]
