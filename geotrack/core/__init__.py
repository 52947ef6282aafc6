"""
Доменный слой (Core Domain).
Хранение журнала локаций, независимое от HTTP.
"""

from geotrack.core.locations import LocationStore

__all__ = ["LocationStore"]
