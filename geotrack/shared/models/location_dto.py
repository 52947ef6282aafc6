# geotrack/shared/models/location_dto.py
"""
DTO локаций: входная точка (fix) и сохранённая запись журнала.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from geotrack.common.timeutils import epoch_to_iso


class LocationFix(BaseModel):
    """Проверенная точка от клиента, ещё не записанная в журнал."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = None  # метры
    timestamp: str


class LocationRecord(BaseModel):
    """
    Запись журнала.

    id и receivedAt назначает сервер; в JSON поля отдаются в camelCase.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    timestamp: str
    received_at: str = Field(..., alias="receivedAt")

    @field_validator("timestamp", mode="before")
    @classmethod
    def _epoch_timestamp(cls, v: Any) -> Any:
        """Старые файлы журнала могут содержать timestamp как epoch-число."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            try:
                return epoch_to_iso(float(v))
            except (OverflowError, OSError, ValueError) as e:
                raise ValueError("timestamp is out of range") from e
        return v

    @classmethod
    def from_fix(cls, fix: LocationFix, record_id: int, received_at: str) -> "LocationRecord":
        return cls(
            id=record_id,
            latitude=fix.latitude,
            longitude=fix.longitude,
            accuracy=fix.accuracy,
            timestamp=fix.timestamp,
            received_at=received_at,
        )

    def to_json(self) -> dict:
        """Словарь в формате API и файла журнала."""
        return self.model_dump(by_alias=True)
