"""
Клиентская часть: HTTP-клиент API и периодическая отправка координат.
"""

from geotrack.client.api_client import LocationApiClient
from geotrack.client.reporter import LocationReporter, PositionProvider, StaticPositionProvider

__all__ = [
    "LocationApiClient",
    "LocationReporter",
    "PositionProvider",
    "StaticPositionProvider",
]
