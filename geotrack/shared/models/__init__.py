"""
Модели данных, общие для сервиса и клиента.
"""

from geotrack.shared.models.location_dto import LocationFix, LocationRecord
from geotrack.shared.models.common import (
    ErrorResponse,
    HealthStatus,
    LocationListResponse,
    LocationResponse,
    MessageResponse,
    ServiceInfo,
)

__all__ = [
    "LocationFix",
    "LocationRecord",
    "ErrorResponse",
    "HealthStatus",
    "LocationListResponse",
    "LocationResponse",
    "MessageResponse",
    "ServiceInfo",
]
