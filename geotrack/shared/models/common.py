# geotrack/shared/models/common.py
"""
Общие модели ответов API.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from geotrack.shared.models.location_dto import LocationRecord


class ErrorResponse(BaseModel):
    """Ответ с ошибкой (400/500)."""

    error: str


class MessageResponse(BaseModel):
    """Ответ только с сообщением (например, 404)."""

    message: str


class LocationResponse(BaseModel):
    """Ответ с одной записью."""

    message: str
    data: LocationRecord


class LocationListResponse(BaseModel):
    """Ответ со списком записей."""

    message: str
    count: int
    data: list[LocationRecord]


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "API is running"
    timestamp: str
    locations_stored: int = Field(..., alias="locationsStored")


class ServiceInfo(BaseModel):
    """Описание API для GET /."""

    message: str
    version: str
    endpoints: dict[str, str]
