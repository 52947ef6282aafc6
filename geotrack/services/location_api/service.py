# geotrack/services/location_api/service.py
"""
Бизнес-логика приёма и выдачи геолокации.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

from geotrack.common.constants import API_VERSION, DEFAULT_QUERY_LIMIT
from geotrack.common.exceptions import ValidationError
from geotrack.common.logger import log_debug, log_info
from geotrack.common.timeutils import epoch_to_iso, utc_now_iso
from geotrack.shared.models.location_dto import LocationFix, LocationRecord

if TYPE_CHECKING:
    from geotrack.core.locations.store import LocationStore


ENDPOINTS = {
    "health": "/api/health",
    "postLocation": "POST /api/location",
    "getLocations": "GET /api/location",
    "getLatest": "GET /api/location/latest",
}


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================

def _is_blank(value: Any) -> bool:
    """Отсутствующее значение: None, пустая строка или False. Ноль считается валидной координатой."""
    return value is None or value is False or (isinstance(value, str) and not value.strip())


def _to_number(value: Any) -> Optional[float]:
    """Число или числовая строка -> float; всё остальное -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _normalize_timestamp(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return utc_now_iso()
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return epoch_to_iso(float(value))
        except (OverflowError, OSError, ValueError) as e:
            raise ValidationError("Timestamp is out of range") from e
    raise ValidationError("Timestamp must be an ISO-8601 string or a numeric epoch")


def validate_location_payload(payload: Any) -> LocationFix:
    """
    Проверяет тело POST /api/location и собирает LocationFix.

    Raises:
        ValidationError: с сообщением о нарушенном ограничении
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")

    raw_lat = payload.get("latitude")
    raw_lon = payload.get("longitude")

    if _is_blank(raw_lat) or _is_blank(raw_lon):
        raise ValidationError("Latitude and longitude are required")

    latitude = _to_number(raw_lat)
    longitude = _to_number(raw_lon)
    if latitude is None or longitude is None:
        raise ValidationError("Latitude and longitude must be numbers")

    if latitude < -90 or latitude > 90:
        raise ValidationError("Latitude must be between -90 and 90")

    if longitude < -180 or longitude > 180:
        raise ValidationError("Longitude must be between -180 and 180")

    raw_accuracy = payload.get("accuracy")
    accuracy = None
    if not _is_blank(raw_accuracy):
        accuracy = _to_number(raw_accuracy)
        if accuracy is None:
            raise ValidationError("Accuracy must be a number")

    return LocationFix(
        latitude=latitude,
        longitude=longitude,
        accuracy=accuracy,
        timestamp=_normalize_timestamp(payload.get("timestamp")),
    )


def parse_limit(raw: Any, default: int = DEFAULT_QUERY_LIMIT) -> int:
    """
    Разбирает параметр limit.

    Пустое, нечисловое или неположительное значение даёт default;
    функция никогда не бросает исключений.
    """
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value > 0 else default


# =============================================================================
# СЕРВИС
# =============================================================================

class LocationService:
    """
    Сервис приёма и выдачи геолокации.

    Собственного состояния не хранит: журнал принадлежит LocationStore,
    который передаётся при создании.
    """

    def __init__(self, store: "LocationStore") -> None:
        self._store = store

    @property
    def store(self) -> "LocationStore":
        return self._store

    async def ingest(self, payload: Any) -> LocationRecord:
        """
        Проверяет точку и добавляет её в журнал.

        Raises:
            ValidationError: некорректные координаты
        """
        try:
            fix = validate_location_payload(payload)
        except ValidationError as e:
            await log_debug(f"Отклонена локация: {e.message}")
            raise

        record = await self._store.append(fix)
        await log_info(
            f"Получена локация #{record.id}: {record.latitude}, {record.longitude}",
            extra={"accuracy": record.accuracy, "timestamp": record.timestamp},
        )
        return record

    def query(self, limit: Any = None) -> list[LocationRecord]:
        """Последние записи журнала (limit по умолчанию 10)."""
        return self._store.recent(parse_limit(limit))

    def latest(self) -> Optional[LocationRecord]:
        return self._store.latest()

    def health(self) -> dict[str, Any]:
        """Статус без проверки зависимостей: процесс жив, значит здоров."""
        return {
            "message": "API is running",
            "timestamp": utc_now_iso(),
            "locationsStored": self._store.count,
        }

    def info(self) -> dict[str, Any]:
        return {
            "message": "Location Tracking API",
            "version": API_VERSION,
            "endpoints": dict(ENDPOINTS),
        }
